"""Dependency injection for FastAPI."""

from txn_engine.app_context import get_app_context
from txn_engine.services import TransactionService


def get_transaction_service() -> TransactionService:
    """Provide the process-wide TransactionService (shared cache)."""
    return get_app_context().transactions
