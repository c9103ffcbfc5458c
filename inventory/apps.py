"""
App configuration for the inventory dashboard.
"""
import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class InventoryConfig(AppConfig):
    """Builds the process-wide ProductStore once at startup."""
    name = 'inventory'
    verbose_name = 'Inventory Dashboard'
    store = None

    def ready(self):
        from .storage import CacheStorage
        from .store import ProductStore

        self.store = ProductStore(CacheStorage())
        self.store.initialize()
        logger.debug(f"Product store ready with {len(self.store.get_all())} products")
