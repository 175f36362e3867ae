"""Remote transaction and product sources."""

from txn_engine.providers.transaction_source import TransactionSource, ProductSource
from txn_engine.providers.http_client import ApiClient
from txn_engine.providers.http_source import HttpTransactionSource, HttpProductSource
from txn_engine.providers.stub_provider import InMemoryTransactionSource, InMemoryProductSource

__all__ = [
    "TransactionSource",
    "ProductSource",
    "ApiClient",
    "HttpTransactionSource",
    "HttpProductSource",
    "InMemoryTransactionSource",
    "InMemoryProductSource",
]
