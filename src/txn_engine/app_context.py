"""Application context for in-process service management.

Builds the sources, the shared CacheService and the services on top of it
exactly once, so every consumer reads through the same cache.
"""

from typing import Optional

from txn_engine.config.settings import Settings, get_settings
from txn_engine.providers import (
    ApiClient,
    HttpProductSource,
    HttpTransactionSource,
    InMemoryProductSource,
    InMemoryTransactionSource,
    ProductSource,
    TransactionSource,
)
from txn_engine.services import (
    CacheService,
    EnrichmentCoordinator,
    MutationGateway,
    TransactionService,
)


class AppContext:
    """
    Application context owning the engine's long-lived objects.

    With api_base_url configured the remote store is reached over HTTP;
    otherwise deterministic in-memory sources are used.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transaction_source: Optional[TransactionSource] = None,
        product_source: Optional[ProductSource] = None,
    ):
        """
        Initialize application context.

        Args:
            settings: Optional settings. Uses the global settings if not provided.
            transaction_source: Override for the transaction store.
            product_source: Override for the product store.
        """
        self._settings = settings or get_settings()
        self._api_client: Optional[ApiClient] = None

        if transaction_source is None or product_source is None:
            if self._settings.api_base_url:
                self._api_client = ApiClient.from_settings(self._settings)
                transaction_source = transaction_source or HttpTransactionSource(self._api_client)
                product_source = product_source or HttpProductSource(self._api_client)
            else:
                product_source = product_source or InMemoryProductSource()
                # Offline stores price and attribute created records from one catalogue
                catalogue = (
                    product_source.products()
                    if isinstance(product_source, InMemoryProductSource)
                    else None
                )
                transaction_source = transaction_source or InMemoryTransactionSource(products=catalogue)

        self.transaction_source = transaction_source
        self.product_source = product_source

        self.cache = CacheService(
            list_stale_seconds=self._settings.list_stale_seconds,
            detail_stale_seconds=self._settings.detail_stale_seconds,
        )
        self.coordinator = EnrichmentCoordinator(
            transaction_source=self.transaction_source,
            product_source=self.product_source,
        )
        self.gateway = MutationGateway(
            transaction_source=self.transaction_source,
            cache=self.cache,
        )
        self.transactions = TransactionService(
            cache=self.cache,
            coordinator=self.coordinator,
            gateway=self.gateway,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    async def aclose(self) -> None:
        """Clean up resources."""
        if self._api_client is not None:
            await self._api_client.aclose()
            self._api_client = None


# Global application context (one per process)
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set (or clear) the global application context."""
    global _app_context
    _app_context = context
