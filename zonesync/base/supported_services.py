from typing import Literal


existing_zone_providers = Literal["gandi"]


existing_ip_sources = Literal["plain", "json"]
