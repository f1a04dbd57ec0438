"""Zonesync CLI — keep a zone record in sync with the public IP.

Usage examples::

    zonesync --apikey KEY --zone 1234 --record home
    zonesync --apikey KEY --zone 1234 --record home --refresh 1m --test
    GANDI_API_KEY=KEY GANDI_ZONE_ID=1234 ZONESYNC_RECORD=home zonesync --once
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any

from pydantic import ValidationError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``zonesync`` CLI.

    Every option may also come from the environment; see
    :class:`~zonesync.base.config.UpdaterConfig`.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="zonesync",
        description="Dynamic DNS updater for versioned zones",
    )
    parser.add_argument("--apikey", dest="api_key", help="Mandatory. API key of the zone service")
    parser.add_argument(
        "--test",
        dest="test_platform",
        action="store_true",
        default=None,
        help="Send requests to the test platform (OT&E) instead of production",
    )
    parser.add_argument("--zone", dest="zone_id", type=int, help="Mandatory. Zone id")
    parser.add_argument("--record", help="Mandatory. Record to update")
    parser.add_argument(
        "--refresh",
        help="Delay between checks for public IP address updates (e.g. 300, 5m, 1h30m; default 5m)",
    )
    parser.add_argument(
        "--ip-source",
        choices=["plain", "json"],
        help="Response format of the public IP service (default plain)",
    )
    parser.add_argument("--ip-url", help="Public IP service URL")
    parser.add_argument("--ip-attempts", type=int, help="Attempts per public IP lookup")
    parser.add_argument("--timeout", type=float, help="Per-call network timeout in seconds")
    parser.add_argument(
        "--max-failures",
        type=int,
        help="Exit after this many consecutive failed checks (default 0, never)",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default INFO)")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Check once and exit instead of polling",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Validates the configuration, reads the currently published value
    and then polls until the process is stopped (or once with ``--once``).

    Exit status: 2 for a missing or invalid option, 1 when the starting
    state cannot be read, the failure limit is reached or the single
    ``--once`` check fails.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    # Lazy-import to keep ``--help`` free of network client imports
    from zonesync.base.config import validate_config
    from zonesync.base.exceptions import EscalationError, ZoneSyncError
    from zonesync.base.logger import zs_logger
    from zonesync.core.loop import PollLoop, bootstrap
    from zonesync.factory import ip_source_factory, zone_api_factory

    raw: dict[str, Any] = {
        key: value
        for key, value in vars(ns).items()
        if key not in ("log_level", "once")
    }
    try:
        config = validate_config(raw)
    except ValidationError as e:
        print("Missing or invalid options:", file=sys.stderr)
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"]) or "config"
            print(f"  {field}: {err['msg']}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        sys.exit(2)

    log_level = ns.log_level or os.environ.get("ZONESYNC_LOG_LEVEL")
    if log_level:
        try:
            zs_logger.set_level(log_level)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)

    zone_api = zone_api_factory("gandi", config)
    ip_source = ip_source_factory(config.ip_source, config)

    try:
        state, record = bootstrap(zone_api, config.zone_id, config.record)
    except ZoneSyncError as e:
        zs_logger.error(
            f"Could not read current record: {e}",
            zone_id=config.zone_id,
            record=config.record,
            operation="bootstrap",
        )
        sys.exit(1)
    zs_logger.info(
        f"Current registered IP: {state.registered_value}",
        zone_id=config.zone_id,
        version=state.active_version,
        record=config.record,
        operation="bootstrap",
    )

    loop = PollLoop(
        zone_api,
        ip_source,
        config.zone_id,
        record,
        config.refresh,
        max_failures=config.max_failures,
    )
    try:
        if ns.once:
            if loop.tick(state).failures:
                sys.exit(1)
        else:
            loop.run(state)
    except EscalationError as e:
        zs_logger.error(str(e), zone_id=config.zone_id, record=config.record, operation="poll")
        sys.exit(1)


if __name__ == "__main__":
    main()
