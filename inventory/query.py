"""
Query engine - filtered, sorted views over the product list.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .models import ProductRecord, SORTABLE_COLUMNS, STRING_COLUMNS

ASCENDING = 'asc'
DESCENDING = 'desc'


@dataclass(frozen=True)
class SortState:
    """Current sort column and direction. ``column=None`` means unsorted."""
    column: Optional[str] = None
    direction: str = ASCENDING

    def __post_init__(self):
        if self.column is not None and self.column not in SORTABLE_COLUMNS:
            raise ValueError(f"Cannot sort by '{self.column}'")
        if self.direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Unknown sort direction '{self.direction}'")

    @property
    def descending(self) -> bool:
        return self.direction == DESCENDING

    def toggle(self, column: str) -> 'SortState':
        """Flip direction on the same column, start ascending on a new one."""
        if column == self.column:
            direction = ASCENDING if self.descending else DESCENDING
            return SortState(column, direction)
        return SortState(column, ASCENDING)


def sort_key(column: str):
    if column in STRING_COLUMNS:
        return lambda record: getattr(record, column).lower()
    return lambda record: getattr(record, column)


def matches(record: ProductRecord, search_term: str, category: str) -> bool:
    if search_term and search_term.lower() not in record.name.lower():
        return False
    return not category or record.category == category


def view(
    records: Iterable[ProductRecord],
    search_term: str = '',
    category: str = '',
    sort: Optional[SortState] = None,
) -> List[ProductRecord]:
    """
    Filter and sort products without touching the store.

    Args:
        records: Products in store order
        search_term: Case-insensitive substring of the product name
        category: Exact category, empty for all
        sort: Sort state; unsorted results keep store order

    Returns:
        New list of matching records (possibly empty)
    """
    result = [record for record in records if matches(record, search_term, category)]

    if sort is not None and sort.column:
        # sorted() is stable and keeps ties in order even with reverse=True
        result = sorted(result, key=sort_key(sort.column), reverse=sort.descending)

    return result
