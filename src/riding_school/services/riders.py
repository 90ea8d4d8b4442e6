"""Read access to rider accounts."""

from dataclasses import dataclass
from typing import Protocol

from riding_school.domain.riders import ROLE_RIDER, RiderRecord


class RiderDirectory(Protocol):
    """Lookup interface for accounts owned by the identity store."""

    def get_by_username(self, username: str) -> RiderRecord | None:
        """Return the account for a username, if present."""

    def list_riders(self) -> list[RiderRecord]:
        """Return all accounts with the rider role."""


@dataclass
class RiderService:
    """Service resolving assignment targets."""

    directory: RiderDirectory

    def find_rider(self, username: str) -> RiderRecord | None:
        """Return the account only when it carries the rider role."""
        account = self.directory.get_by_username(username)
        if account is None or account.role != ROLE_RIDER:
            return None
        return account

    def list_riders(self) -> list[RiderRecord]:
        """Return riders sorted by username."""
        return sorted(self.directory.list_riders(), key=lambda rider: rider.username)
