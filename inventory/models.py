"""
Inventory Models - Core data entities for the inventory dashboard.

Products are not stored in a relational database. The whole list lives in
memory inside ``ProductStore`` and is mirrored to a key-value storage
collaborator as JSON text, so the entities here are plain dataclasses.

Models:
    - ProductRecord: One inventory item (surrogate id + editable barcode)
    - StockStatus: Display-only stock level bucket
"""
from dataclasses import dataclass, field, asdict
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Any, List
from uuid import uuid4


# Quantities strictly below this count as low stock.
LOW_STOCK_THRESHOLD = 5

# Keeps price * quantity within a sane number of digits.
MAX_QUANTITY = 1_000_000_000

STRING_COLUMNS = ('barcode', 'name', 'category')
NUMERIC_COLUMNS = ('quantity', 'price')
SORTABLE_COLUMNS = STRING_COLUMNS + NUMERIC_COLUMNS


class StockStatus(str, Enum):
    """Stock level shown next to each row."""
    IN_STOCK = 'in_stock'
    LOW_STOCK = 'low_stock'
    OUT_OF_STOCK = 'out_of_stock'

    @property
    def label(self) -> str:
        return {
            StockStatus.IN_STOCK: 'In Stock',
            StockStatus.LOW_STOCK: 'Low Stock',
            StockStatus.OUT_OF_STOCK: 'Out of Stock',
        }[self]


def coerce_quantity(value) -> int:
    """
    Whole-number quantity from stored data.

    Numeric strings like ``"7"`` are accepted; booleans and fractional
    numbers are rejected rather than truncated.

    Raises:
        ValueError: If the value is not a whole number
    """
    if isinstance(value, bool):
        raise ValueError(f"Quantity must be a number, got {value!r}")
    if isinstance(value, (Decimal, float)) and value != int(value):
        raise ValueError(f"Quantity must be a whole number, got {value}")
    return int(value)


def generate_record_id() -> str:
    """Surrogate keys are assigned once and never edited."""
    return uuid4().hex


@dataclass
class ProductRecord:
    """
    Product entity representing one inventory item.

    ``id`` is the internal lookup key and never changes after creation.
    ``barcode`` is what the user sees and edits; it carries the uniqueness
    constraint.
    """
    barcode: str
    name: str
    category: str
    quantity: int
    price: Decimal
    id: str = field(default_factory=generate_record_id)

    def __str__(self):
        return f"{self.name} (${self.price})"

    @property
    def stock_status(self) -> StockStatus:
        if self.quantity == 0:
            return StockStatus.OUT_OF_STOCK
        if self.quantity < LOW_STOCK_THRESHOLD:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    @property
    def is_low_stock(self) -> bool:
        """Check if quantity is below the low stock threshold."""
        return self.quantity < LOW_STOCK_THRESHOLD

    @property
    def value(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation used for persistence (price as a JSON number)."""
        data = asdict(self)
        data['price'] = float(self.price)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProductRecord':
        """
        Build a record from persisted data, coercing numeric fields.

        Older data only carries ``id``; it doubles as the barcode.

        Raises:
            ValueError: If a field is missing or cannot be coerced
        """
        try:
            record_id = str(data['id'])
            quantity = coerce_quantity(data['quantity'])
            price = Decimal(str(data['price']))
            record = cls(
                id=record_id,
                barcode=str(data.get('barcode') or record_id),
                name=str(data['name']),
                category=str(data['category']),
                quantity=quantity,
                price=price,
            )
        except (KeyError, TypeError, ValueError, OverflowError, InvalidOperation) as e:
            raise ValueError(f"Invalid product data {data!r}: {e}") from e

        if quantity < 0 or not price.is_finite() or price < 0:
            raise ValueError(f"Negative or non-finite amount in {data!r}")
        return record


def seed_products() -> List[ProductRecord]:
    """Fresh copies of the example records used when nothing is persisted."""
    rows = [
        ('1715623456789', 'Laptop', 'Electronics', 15, '999.99'),
        ('1715623456790', 'T-Shirt', 'Clothing', 4, '19.99'),
        ('1715623456791', 'Coffee Maker', 'Home', 8, '49.99'),
        ('1715623456792', 'Headphones', 'Electronics', 3, '149.99'),
        ('1715623456793', 'Apples', 'Groceries', 50, '0.99'),
    ]
    return [
        ProductRecord(
            id=code,
            barcode=code,
            name=name,
            category=category,
            quantity=quantity,
            price=Decimal(price),
        )
        for code, name, category, quantity, price in rows
    ]
