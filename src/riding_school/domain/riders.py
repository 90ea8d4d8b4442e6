"""Domain models for riders and request principals."""

from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_RIDER = "rider"
ROLES = frozenset({ROLE_ADMIN, ROLE_RIDER})


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""

    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class RiderRecord:
    """Rider account as exposed by the identity store."""

    username: str
    email: str
    role: str
    uses_default_credential: bool = False
