"""API routers package."""

from txn_engine.api.routers.transactions import router as transactions_router

__all__ = [
    "transactions_router",
]
