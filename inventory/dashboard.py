"""
Dashboard - routes UI actions into the store, editor and query engine.

A ``Dashboard`` is built per request from the shared ``ProductStore`` and
the caller's ``DashboardState`` (search criteria, sort, open form, pending
delete). Every action ends with ``render()``, which returns the payload the
front end draws: table rows, summary stats, editor state and the
notifications raised by the action.
"""
import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from django.conf import settings

from .query import SortState, view
from .serializers import InventoryStatsSerializer, ProductRowSerializer
from .services import DuplicateIdError, RecordEditor, ValidationError
from .stats import compute_stats, money_string
from .store import ProductStore, StoreChange

logger = logging.getLogger(__name__)

EDITOR_CLOSED = 'closed'
EDITOR_ADD = 'add'
EDITOR_EDIT = 'edit'

EDITOR_TITLES = {
    EDITOR_ADD: 'Add New Product',
    EDITOR_EDIT: 'Edit Product',
}

EMPTY_MESSAGE = 'No products found.'
EMPTY_HINT = 'Try adjusting your search or add a new product.'

MESSAGE_ADDED = 'Product added successfully!'
MESSAGE_UPDATED = 'Product updated successfully!'
MESSAGE_DELETED = 'Product deleted successfully!'
MESSAGE_DUPLICATE = 'A product with this barcode already exists!'


class EditorClosedError(Exception):
    """Raised when a form is submitted without being opened first."""
    pass


@dataclass
class DashboardState:
    """Per-session UI state. Never persisted with the products."""
    search_term: str = ''
    category: str = ''
    sort: SortState = field(default_factory=SortState)
    editor_mode: str = EDITOR_CLOSED
    editing_id: Optional[str] = None
    pending_delete_id: Optional[str] = None

    def to_session(self) -> Dict:
        data = asdict(self)
        data['sort'] = {'column': self.sort.column, 'direction': self.sort.direction}
        return data

    @classmethod
    def from_session(cls, data: Optional[Dict]) -> 'DashboardState':
        """Rebuild state from the session, starting over if it is unusable."""
        if not data:
            return cls()
        try:
            sort = SortState(**(data.get('sort') or {}))
            state = cls(
                search_term=data.get('search_term', ''),
                category=data.get('category', ''),
                sort=sort,
                editor_mode=data.get('editor_mode', EDITOR_CLOSED),
                editing_id=data.get('editing_id'),
                pending_delete_id=data.get('pending_delete_id'),
            )
        except (TypeError, ValueError) as e:
            logger.warning(f"Resetting unusable dashboard session state: {e}")
            return cls()
        if state.editor_mode not in (EDITOR_CLOSED, EDITOR_ADD, EDITOR_EDIT):
            state.editor_mode = EDITOR_CLOSED
            state.editing_id = None
        return state


class Dashboard:
    """
    Presentation adapter for one session.

    Args:
        store: Shared product store
        state: Session UI state, a fresh one when omitted
        categories: Choices for the category filter and form
    """

    def __init__(
        self,
        store: ProductStore,
        state: Optional[DashboardState] = None,
        categories: Optional[List[str]] = None,
    ):
        self.store = store
        self.editor = RecordEditor(store)
        self.state = state or DashboardState()
        if categories is None:
            categories = getattr(settings, 'INVENTORY_CATEGORIES', [])
        self.categories = list(categories)
        self.notifications: List[Dict] = []
        self.form_errors: Optional[Dict] = None
        self.stats = compute_stats(self.store.get_all())

    # =========================================================================
    # View criteria
    # =========================================================================

    def search(self, term: str) -> Dict:
        self.state.search_term = term or ''
        return self.render()

    def filter_by_category(self, category: str) -> Dict:
        self.state.category = category or ''
        return self.render()

    def sort_by(self, column: str) -> Dict:
        """Toggle or select the sort column. Unknown columns raise ValueError."""
        self.state.sort = self.state.sort.toggle(column)
        return self.render()

    # =========================================================================
    # Product form
    # =========================================================================

    def open_add_form(self) -> Dict:
        self.state.editor_mode = EDITOR_ADD
        self.state.editing_id = None
        return self.render()

    def open_edit_form(self, record_id: str) -> Dict:
        if self.store.get(record_id) is None:
            logger.debug(f"Edit requested for missing product {record_id}")
            return self.render()
        self.state.editor_mode = EDITOR_EDIT
        self.state.editing_id = record_id
        return self.render()

    def cancel_form(self) -> Dict:
        self._close_form()
        return self.render()

    def submit_form(self, fields: Dict) -> Dict:
        """
        Validate and save the open form.

        On success the form closes and a notification is queued.

        Raises:
            EditorClosedError: If no form is open
            ValidationError: Form stays open and is marked invalid
            DuplicateIdError: Form stays open, a blocking alert is queued
        """
        if self.state.editor_mode == EDITOR_CLOSED:
            raise EditorClosedError("No product form is open")

        editing_id = self.state.editing_id if self.state.editor_mode == EDITOR_EDIT else None
        try:
            result = self.editor.upsert(fields, editing_id=editing_id)
        except ValidationError as e:
            self.form_errors = e.detail
            raise
        except DuplicateIdError:
            self.notify(MESSAGE_DUPLICATE, level='danger', blocking=True)
            raise

        self._close_form()
        if result.change.applied:
            self.notify(MESSAGE_ADDED if result.created else MESSAGE_UPDATED)
        self._after_change(result.change)
        return self.render()

    def _close_form(self) -> None:
        self.state.editor_mode = EDITOR_CLOSED
        self.state.editing_id = None
        self.form_errors = None

    # =========================================================================
    # Two-step delete
    # =========================================================================

    def request_delete(self, record_id: str) -> Dict:
        if self.store.get(record_id) is None:
            logger.debug(f"Delete requested for missing product {record_id}")
            return self.render()
        self.state.pending_delete_id = record_id
        return self.render()

    def confirm_delete(self) -> Dict:
        record_id = self.state.pending_delete_id
        if record_id is None:
            return self.render()

        self.state.pending_delete_id = None
        change = self.editor.delete(record_id)
        if change.applied:
            self.notify(MESSAGE_DELETED, level='danger')
        self._after_change(change)
        return self.render()

    def cancel_delete(self) -> Dict:
        self.state.pending_delete_id = None
        return self.render()

    # =========================================================================
    # Rendering
    # =========================================================================

    def notify(self, message: str, level: str = 'success', blocking: bool = False) -> None:
        self.notifications.append({'level': level, 'message': message, 'blocking': blocking})

    def _after_change(self, change: StoreChange) -> None:
        if change.applied:
            self.stats = compute_stats(self.store.get_all())

    def visible_products(self):
        return view(
            self.store.get_all(),
            search_term=self.state.search_term,
            category=self.state.category,
            sort=self.state.sort,
        )

    def editor_payload(self) -> Dict:
        mode = self.state.editor_mode
        initial = {}
        if mode == EDITOR_EDIT:
            record = self.store.get(self.state.editing_id)
            if record is not None:
                initial = {
                    'barcode': record.barcode,
                    'name': record.name,
                    'category': record.category,
                    'quantity': record.quantity,
                    'price': money_string(record.price),
                }
        return {
            'mode': mode,
            'title': EDITOR_TITLES.get(mode),
            'editing_id': self.state.editing_id,
            'initial': initial,
            'form_invalid': self.form_errors is not None,
            'errors': self.form_errors or {},
        }

    def pending_delete_payload(self) -> Optional[Dict]:
        record_id = self.state.pending_delete_id
        record = self.store.get(record_id) if record_id else None
        if record is None:
            return None
        return {'id': record.id, 'name': record.name}

    def render(self) -> Dict:
        products = self.visible_products()
        return {
            'products': ProductRowSerializer(products, many=True).data,
            'empty': not products,
            'empty_message': EMPTY_MESSAGE if not products else None,
            'empty_hint': EMPTY_HINT if not products else None,
            'stats': InventoryStatsSerializer(self.stats).data,
            'criteria': {
                'search': self.state.search_term,
                'category': self.state.category,
            },
            'sort': {
                'column': self.state.sort.column,
                'direction': self.state.sort.direction,
            },
            'editor': self.editor_payload(),
            'pending_delete': self.pending_delete_payload(),
            'categories': self.categories,
            'notifications': list(self.notifications),
        }
