"""
Record Editor - validated create/update/delete of products.

Upsert flow:
1. Validate the submitted form (all field errors reported together)
2. Reject the write if another product already uses the barcode
3. Editing an existing product: replace its fields, keep its id
4. Otherwise: append a new product with a fresh id
5. The store persists and returns a StoreChange confirmation
"""
import logging
from typing import Dict, NamedTuple, Optional

from rest_framework import serializers

from .models import ProductRecord
from .serializers import ProductInputSerializer
from .store import ProductStore, StoreChange

logger = logging.getLogger(__name__)

ValidationError = serializers.ValidationError


class DuplicateIdError(Exception):
    """Raised when a barcode is already used by a different product."""
    def __init__(self, barcode: str, existing_id: str):
        self.barcode = barcode
        self.existing_id = existing_id
        super().__init__(
            f"Barcode {barcode} already belongs to product {existing_id}"
        )


class EditResult(NamedTuple):
    record: ProductRecord
    created: bool
    change: StoreChange


class RecordEditor:
    """Applies validated writes to a ProductStore."""

    def __init__(self, store: ProductStore):
        self.store = store

    def validate(self, data: Dict) -> Dict:
        """
        Validate product form data.

        Returns:
            Cleaned field values

        Raises:
            ValidationError: With every offending field listed
        """
        serializer = ProductInputSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        return dict(serializer.validated_data)

    def check_unique_barcode(self, barcode: str, editing_id: Optional[str] = None) -> None:
        existing = self.store.find_by_barcode(barcode)
        if existing is not None and existing.id != editing_id:
            raise DuplicateIdError(barcode, existing.id)

    def upsert(self, data: Dict, editing_id: Optional[str] = None) -> EditResult:
        """
        Create a product, or replace the one identified by ``editing_id``.

        An ``editing_id`` that no longer exists is a no-op; the returned
        change has ``applied=False``.

        Raises:
            ValidationError: If the form data is invalid
            DuplicateIdError: If the barcode belongs to another product
        """
        cleaned = self.validate(data)
        self.check_unique_barcode(cleaned['barcode'], editing_id)

        record = ProductRecord(**cleaned)

        if editing_id is not None:
            if self.store.get(editing_id) is None:
                logger.info(f"Edit target {editing_id} no longer exists, nothing updated")
                return EditResult(record, False, StoreChange('replace', editing_id, False))
            change = self.store.replace(editing_id, record)
            return EditResult(record, False, change)

        change = self.store.add(record)
        return EditResult(record, True, change)

    def delete(self, record_id: str) -> StoreChange:
        """Remove a product; unknown ids are ignored."""
        return self.store.remove(record_id)
