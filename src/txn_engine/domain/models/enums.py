"""Enumerations for domain models."""

from enum import Enum
from typing import Optional


class TransactionKind(str, Enum):
    """Record kinds held by the remote transaction store."""

    PURCHASE = "PURCHASE"
    RENTAL = "RENTAL"


class TransactionType(str, Enum):
    """Tag of the domain Transaction variant."""

    BUY = "BUY"
    RENT = "RENT"


class TransactionStatus(str, Enum):
    """Transaction status."""

    # The remote store exposes no status yet; every record reads as completed.
    COMPLETED = "COMPLETED"


class RentType(str, Enum):
    """Rental billing period derived from a product or rental rent_option."""

    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"

    @classmethod
    def from_option(cls, option: Optional[str]) -> Optional["RentType"]:
        """Map a store rent_option ("day", "weekly", ...) to a RentType; unknown values read as DAILY."""
        if not option:
            return None
        return _RENT_OPTIONS.get(option.strip().lower(), cls.DAILY)


class CacheScope(str, Enum):
    """Query scopes cached per kind."""

    LIST = "LIST"
    DETAIL = "DETAIL"


class CacheState(str, Enum):
    """Lifecycle states of a cache entry."""

    EMPTY = "EMPTY"
    LOADING = "LOADING"
    FRESH = "FRESH"
    STALE = "STALE"
    ERROR = "ERROR"


class MutationAction(str, Enum):
    """Mutations accepted by the gateway."""

    CREATE = "CREATE"
    DELETE = "DELETE"


_RENT_OPTIONS = {
    "hour": RentType.HOURLY,
    "hourly": RentType.HOURLY,
    "day": RentType.DAILY,
    "daily": RentType.DAILY,
    "week": RentType.WEEKLY,
    "weekly": RentType.WEEKLY,
    "month": RentType.MONTHLY,
    "monthly": RentType.MONTHLY,
}
