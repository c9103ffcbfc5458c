"""
Product Store - the authoritative in-memory product list.

The store loads once at startup and writes the full list back to its
storage backend after every mutation. Each mutation returns a
``StoreChange`` so callers can decide whether to recompute and re-render.
"""
import json
import logging
from decimal import Decimal
from typing import List, NamedTuple, Optional, Tuple

from django.conf import settings

from .models import ProductRecord, seed_products

logger = logging.getLogger(__name__)


class PersistedDataCorrupt(Exception):
    """Raised when persisted product data cannot be decoded."""
    pass


class StoreChange(NamedTuple):
    """Confirmation returned by every store mutation."""
    action: str
    record_id: str
    applied: bool


def encode_products(records) -> str:
    return json.dumps([record.to_dict() for record in records])


def decode_products(text: str) -> List[ProductRecord]:
    """
    Decode persisted JSON text into product records.

    Raises:
        PersistedDataCorrupt: If the text is not a JSON list of valid products
    """
    try:
        data = json.loads(text, parse_float=Decimal)
    except (TypeError, ValueError) as e:
        raise PersistedDataCorrupt(f"Stored products are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistedDataCorrupt(f"Expected a list of products, got {type(data).__name__}")

    try:
        return [ProductRecord.from_dict(item) for item in data]
    except ValueError as e:
        raise PersistedDataCorrupt(str(e)) from e


class ProductStore:
    """
    Owns the product list and mirrors it to storage.

    Args:
        storage: Object with ``load(key)`` and ``save(key, text)``
        key: Storage key holding the encoded list
    """

    def __init__(self, storage, key: Optional[str] = None):
        self.storage = storage
        self.key = key or getattr(settings, 'INVENTORY_STORAGE_KEY', 'products')
        self._records: List[ProductRecord] = []

    def initialize(self) -> None:
        """Load persisted products, falling back to the seed list. Never raises."""
        try:
            text = self.storage.load(self.key)
        except Exception as e:
            logger.warning(f"Could not read products from '{self.key}', using seed data: {e}")
            self._records = seed_products()
            return

        if text is None:
            logger.info(f"No products stored under '{self.key}', using seed data")
            self._records = seed_products()
            return

        try:
            self._records = decode_products(text)
        except PersistedDataCorrupt as e:
            logger.warning(f"Discarding corrupt product data under '{self.key}': {e}")
            self._records = seed_products()
            return

        logger.info(f"Loaded {len(self._records)} products from '{self.key}'")

    def get_all(self) -> Tuple[ProductRecord, ...]:
        return tuple(self._records)

    def get(self, record_id: str) -> Optional[ProductRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def find_by_barcode(self, barcode: str) -> Optional[ProductRecord]:
        for record in self._records:
            if record.barcode == barcode:
                return record
        return None

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return -1

    def add(self, record: ProductRecord) -> StoreChange:
        self._records.append(record)
        self.persist()
        logger.info(f"Added product {record.id} ({record.name})")
        return StoreChange('add', record.id, True)

    def replace(self, record_id: str, record: ProductRecord) -> StoreChange:
        """Replace the record with ``record_id``; the surrogate id is kept."""
        index = self._index_of(record_id)
        if index == -1:
            logger.debug(f"Replace skipped, product {record_id} not found")
            return StoreChange('replace', record_id, False)

        record.id = record_id
        self._records[index] = record
        self.persist()
        logger.info(f"Replaced product {record_id} ({record.name})")
        return StoreChange('replace', record_id, True)

    def remove(self, record_id: str) -> StoreChange:
        index = self._index_of(record_id)
        if index == -1:
            logger.debug(f"Remove skipped, product {record_id} not found")
            return StoreChange('remove', record_id, False)

        removed = self._records.pop(index)
        self.persist()
        logger.info(f"Removed product {record_id} ({removed.name})")
        return StoreChange('remove', record_id, True)

    def reset(self, records) -> None:
        """Replace the whole list, e.g. when re-seeding."""
        self._records = list(records)
        self.persist()
        logger.info(f"Store reset with {len(self._records)} products")

    def persist(self) -> None:
        # Storage failures propagate; there is no retry.
        self.storage.save(self.key, encode_products(self._records))
