"""Supabase-backed rider directory."""

from dataclasses import dataclass

from supabase import Client

from riding_school.domain.riders import ROLE_RIDER, RiderRecord
from riding_school.services.riders import RiderDirectory

_COLUMNS = "username, email, role, uses_default_password"


@dataclass
class SupabaseRiderRepository(RiderDirectory):
    """Reads accounts from the ``users`` table."""

    client: Client

    def get_by_username(self, username: str) -> RiderRecord | None:
        """Return the account for a username, if present."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("username", username)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_rider(response.data[0])

    def list_riders(self) -> list[RiderRecord]:
        """Return accounts with the rider role."""
        response = (
            self.client.table("users").select(_COLUMNS).eq("role", ROLE_RIDER).execute()
        )
        return [_parse_rider(row) for row in response.data or []]


def _parse_rider(row: dict[str, object]) -> RiderRecord:
    return RiderRecord(
        username=str(row["username"]),
        email=str(row["email"]),
        role=str(row["role"]),
        uses_default_credential=bool(row.get("uses_default_password", False)),
    )
