"""Public IP source blueprint."""

from abc import ABC, abstractmethod


class PublicIPSourceBlueprint(ABC):
    """Abstract interface to a service reporting the host's public address."""

    @abstractmethod
    def current_ipv4(self) -> str:
        """Return the public IPv4 address as a dotted quad.

        Raises:
            PublicIPError: If the lookup fails or the answer is not an
                IPv4 address.
        """
