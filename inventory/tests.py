"""
Tests for the inventory dashboard.

Test Cases:
1. Product records: coercion from stored data and stock status
2. Store: seed fallback, persistence round-trip, mutation confirmations
3. Query engine: filtering, stable case-insensitive sorting, sort toggling
4. Stats: exact totals, low stock and record counts
5. Record editor: validation, duplicate barcodes, edit and delete
6. Dashboard: form and delete workflows, notifications, session state
7. API: HTTP status codes and session-backed dashboard actions
"""
import json
from decimal import Decimal
from io import StringIO

from django.apps import apps
from django.core.management import call_command
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework.test import APIClient

from inventory.dashboard import (
    Dashboard,
    DashboardState,
    EditorClosedError,
    MESSAGE_ADDED,
    MESSAGE_DELETED,
    MESSAGE_DUPLICATE,
    MESSAGE_UPDATED,
)
from inventory.models import MAX_QUANTITY, ProductRecord, StockStatus, SORTABLE_COLUMNS, seed_products
from inventory.query import SortState, sort_key, view
from inventory.services import DuplicateIdError, RecordEditor, ValidationError
from inventory.stats import compute_stats
from inventory.storage import MemoryStorage
from inventory.store import ProductStore, decode_products, PersistedDataCorrupt

LAPTOP = '1715623456789'
TSHIRT = '1715623456790'
COFFEE_MAKER = '1715623456791'
HEADPHONES = '1715623456792'
APPLES = '1715623456793'


def make_store(storage=None):
    store = ProductStore(storage if storage is not None else MemoryStorage(), key='products')
    store.initialize()
    return store


def names(records):
    return [record.name for record in records]


def product_form(**overrides):
    data = {
        'barcode': '4006381333931',
        'name': 'Desk Lamp',
        'category': 'Home',
        'quantity': 12,
        'price': '24.50',
    }
    data.update(overrides)
    return data


class ProductRecordTestCase(SimpleTestCase):
    """Test cases for ProductRecord coercion and display status."""

    def test_stock_status(self):
        record = seed_products()[0]

        record.quantity = 0
        self.assertEqual(record.stock_status, StockStatus.OUT_OF_STOCK)
        self.assertEqual(record.stock_status.label, 'Out of Stock')

        record.quantity = 4
        self.assertEqual(record.stock_status, StockStatus.LOW_STOCK)

        record.quantity = 5
        self.assertEqual(record.stock_status, StockStatus.IN_STOCK)
        self.assertEqual(record.stock_status.label, 'In Stock')

    def test_from_dict_coerces_numbers(self):
        record = ProductRecord.from_dict({
            'id': 'abc', 'barcode': '42', 'name': 'Tea', 'category': 'Groceries',
            'quantity': '7', 'price': '3.25',
        })

        self.assertEqual(record.quantity, 7)
        self.assertEqual(record.price, Decimal('3.25'))

    def test_from_dict_without_barcode_uses_id(self):
        """Lists saved before barcodes were split from ids still load."""
        record = ProductRecord.from_dict({
            'id': 1715623456789, 'name': 'Laptop', 'category': 'Electronics',
            'quantity': 15, 'price': 999.99,
        })

        self.assertEqual(record.id, LAPTOP)
        self.assertEqual(record.barcode, LAPTOP)

    def test_from_dict_rejects_bad_data(self):
        bad_rows = [
            {'id': '1', 'name': 'X', 'category': 'Home', 'quantity': 'many', 'price': 1},
            {'id': '1', 'name': 'X', 'category': 'Home', 'quantity': 1, 'price': 'cheap'},
            {'id': '1', 'name': 'X', 'category': 'Home', 'quantity': -1, 'price': 1},
            {'id': '1', 'name': 'X', 'quantity': 1, 'price': 1},
            'not a product',
        ]
        for row in bad_rows:
            with self.subTest(row=row):
                with self.assertRaises(ValueError):
                    ProductRecord.from_dict(row)

    def test_from_dict_rejects_fractional_and_boolean_quantity(self):
        for quantity in [Decimal('4.7'), 4.7, True, False, Decimal('NaN'), float('inf')]:
            with self.subTest(quantity=quantity):
                with self.assertRaises(ValueError):
                    ProductRecord.from_dict({
                        'id': '1', 'name': 'X', 'category': 'Home',
                        'quantity': quantity, 'price': 1,
                    })

    def test_whole_decimal_quantity_is_accepted(self):
        record = ProductRecord.from_dict({
            'id': '1', 'name': 'X', 'category': 'Home', 'quantity': Decimal('4.0'), 'price': 1,
        })

        self.assertEqual(record.quantity, 4)

    def test_fractional_stored_quantity_is_corrupt(self):
        text = '[{"id": "1", "name": "X", "category": "Home", "quantity": 4.7, "price": 1}]'

        with self.assertRaises(PersistedDataCorrupt):
            decode_products(text)
        self.assertEqual(len(make_store(MemoryStorage({'products': text})).get_all()), 5)

    def test_new_records_get_distinct_ids(self):
        first = ProductRecord(barcode='1', name='A', category='Home', quantity=1, price=Decimal('1'))
        second = ProductRecord(barcode='1', name='A', category='Home', quantity=1, price=Decimal('1'))

        self.assertNotEqual(first.id, second.id)
        self.assertNotEqual(first.id, first.barcode)


class ProductStoreTestCase(SimpleTestCase):
    """Test cases for loading, persisting and mutating the product list."""

    def test_initialize_without_stored_data_uses_seed(self):
        store = make_store()

        self.assertEqual(
            names(store.get_all()),
            ['Laptop', 'T-Shirt', 'Coffee Maker', 'Headphones', 'Apples']
        )

    def test_initialize_with_corrupt_data_uses_seed(self):
        """
        Test: Undecodable storage falls back to the seed list.

        Given: Storage holding invalid JSON, a non-list, or a bad record
        When: Initializing the store
        Then: The five seed products are loaded and nothing is raised
        """
        for text in ['{not json', '{"id": "1"}', '[{"id": "1", "name": "X"}]', 'null']:
            with self.subTest(text=text):
                store = make_store(MemoryStorage({'products': text}))
                self.assertEqual(len(store.get_all()), 5)

    def test_initialize_with_empty_list(self):
        store = make_store(MemoryStorage({'products': '[]'}))

        self.assertEqual(store.get_all(), ())

    def test_decode_rejects_non_list(self):
        with self.assertRaises(PersistedDataCorrupt):
            decode_products('{"products": []}')

    def test_persist_round_trip(self):
        storage = MemoryStorage()
        store = make_store(storage)
        store.add(ProductRecord(
            barcode='555', name='Kettle', category='Home', quantity=0, price=Decimal('5'),
        ))
        before = store.get_all()

        reloaded = make_store(storage)

        self.assertEqual(reloaded.get_all(), before)
        self.assertEqual(
            [record.id for record in reloaded.get_all()],
            [record.id for record in before]
        )

    def test_persisted_layout(self):
        storage = MemoryStorage()
        store = make_store(storage)
        store.persist()

        data = json.loads(storage.values['products'])

        self.assertEqual(len(data), 5)
        self.assertEqual(data[0], {
            'id': LAPTOP, 'barcode': LAPTOP, 'name': 'Laptop',
            'category': 'Electronics', 'quantity': 15, 'price': 999.99,
        })

    def test_initialize_does_not_write(self):
        storage = MemoryStorage()
        make_store(storage)

        self.assertEqual(storage.values, {})

    def test_mutations_persist_and_confirm(self):
        storage = MemoryStorage()
        store = make_store(storage)

        change = store.remove(TSHIRT)

        self.assertEqual(change.action, 'remove')
        self.assertTrue(change.applied)
        self.assertNotIn('T-Shirt', storage.values['products'])

    def test_replace_keeps_surrogate_id(self):
        store = make_store()
        updated = ProductRecord(
            barcode='999', name='Laptop Pro', category='Electronics',
            quantity=2, price=Decimal('1999.00'),
        )

        change = store.replace(LAPTOP, updated)

        self.assertTrue(change.applied)
        self.assertEqual(store.get(LAPTOP).barcode, '999')
        self.assertEqual(store.get_all()[0].name, 'Laptop Pro')

    def test_missing_id_is_not_applied(self):
        storage = MemoryStorage()
        store = make_store(storage)
        record = seed_products()[0]

        self.assertFalse(store.replace('missing', record).applied)
        self.assertFalse(store.remove('missing').applied)
        self.assertEqual(storage.values, {})
        self.assertEqual(len(store.get_all()), 5)

    def test_initialize_when_storage_read_fails(self):
        """
        Test: A storage backend that cannot be read falls back to the seed list.

        Given: Storage whose load raises (e.g. Redis unreachable)
        When: Initializing the store
        Then: Nothing is raised and the five seed products are loaded
        """
        class UnreachableStorage(MemoryStorage):
            def load(self, key):
                raise ConnectionError('redis down')

        storage = UnreachableStorage()
        store = make_store(storage)

        self.assertEqual(len(store.get_all()), 5)
        store.remove(APPLES)
        self.assertEqual(len(json.loads(storage.values['products'])), 4)

    def test_get_all_is_a_snapshot(self):
        store = make_store()
        snapshot = store.get_all()

        store.remove(APPLES)

        self.assertEqual(len(snapshot), 5)
        self.assertEqual(len(store.get_all()), 4)


class QueryEngineTestCase(SimpleTestCase):
    """Test cases for filtering and sorting."""

    def setUp(self):
        self.records = seed_products()

    def test_no_criteria_returns_records_unchanged(self):
        self.assertEqual(view(self.records, '', '', SortState()), self.records)
        self.assertEqual(view(self.records), self.records)

    def test_search_is_case_insensitive_substring(self):
        self.assertEqual(names(view(self.records, 'lap')), ['Laptop'])
        self.assertEqual(names(view(self.records, 'LAP')), ['Laptop'])
        self.assertEqual(names(view(self.records, 'ee')), ['Coffee Maker'])

    def test_category_filter_keeps_store_order(self):
        result = view(self.records, category='Electronics')

        self.assertEqual(names(result), ['Laptop', 'Headphones'])

    def test_filter_matches_definition(self):
        for term in ['', 'a', 'LAP', 'e', 'zzz']:
            for category in ['', 'Electronics', 'Home', 'Nope']:
                with self.subTest(term=term, category=category):
                    expected = [
                        record for record in self.records
                        if term.lower() in record.name.lower()
                        and (not category or record.category == category)
                    ]
                    self.assertEqual(view(self.records, term, category), expected)

    def test_empty_result(self):
        self.assertEqual(view(self.records, 'zzz'), [])

    def test_sort_by_price(self):
        ascending = view(self.records, sort=SortState('price'))
        descending = view(self.records, sort=SortState('price', 'desc'))

        self.assertEqual(
            names(ascending),
            ['Apples', 'T-Shirt', 'Coffee Maker', 'Headphones', 'Laptop']
        )
        self.assertEqual(names(descending), list(reversed(names(ascending))))

    def test_sorted_results_are_ordered(self):
        for column in SORTABLE_COLUMNS:
            for direction in ('asc', 'desc'):
                with self.subTest(column=column, direction=direction):
                    key = sort_key(column)
                    result = [key(r) for r in view(self.records, sort=SortState(column, direction))]
                    for earlier, later in zip(result, result[1:]):
                        if direction == 'asc':
                            self.assertLessEqual(earlier, later)
                        else:
                            self.assertGreaterEqual(earlier, later)

    def test_string_sort_is_case_insensitive(self):
        records = [
            ProductRecord(barcode='b', name='banana', category='Groceries', quantity=1, price=Decimal('1')),
            ProductRecord(barcode='a', name='Apple', category='Groceries', quantity=1, price=Decimal('1')),
            ProductRecord(barcode='c', name='cherry', category='Groceries', quantity=1, price=Decimal('1')),
        ]

        self.assertEqual(names(view(records, sort=SortState('name'))), ['Apple', 'banana', 'cherry'])

    def test_ties_keep_original_order(self):
        records = [
            ProductRecord(barcode='1', name='First', category='Home', quantity=3, price=Decimal('1')),
            ProductRecord(barcode='2', name='Second', category='Home', quantity=1, price=Decimal('1')),
            ProductRecord(barcode='3', name='Third', category='Home', quantity=3, price=Decimal('1')),
        ]

        ascending = view(records, sort=SortState('quantity'))
        descending = view(records, sort=SortState('quantity', 'desc'))

        self.assertEqual(names(ascending), ['Second', 'First', 'Third'])
        self.assertEqual(names(descending), ['First', 'Third', 'Second'])

    def test_sort_toggle(self):
        state = SortState().toggle('price')
        self.assertEqual(state, SortState('price', 'asc'))

        state = state.toggle('price')
        self.assertEqual(state, SortState('price', 'desc'))

        state = state.toggle('name')
        self.assertEqual(state, SortState('name', 'asc'))

    def test_unknown_sort_column(self):
        with self.assertRaises(ValueError):
            SortState().toggle('id')

    def test_view_does_not_mutate_input(self):
        original = list(self.records)

        view(self.records, 'a', 'Electronics', SortState('price', 'desc'))

        self.assertEqual(self.records, original)


class StatsTestCase(SimpleTestCase):
    """Test cases for summary statistics."""

    def test_seed_stats(self):
        stats = compute_stats(seed_products())

        self.assertEqual(stats.total_value, Decimal('15979.20'))
        self.assertEqual(stats.formatted_total_value, '$15979.20')
        self.assertEqual(stats.low_stock_count, 2)
        self.assertEqual(stats.record_count, 5)

    def test_total_is_exact_sum(self):
        records = seed_products()
        records[0].price = Decimal('0.005')
        records[1].quantity = 0

        stats = compute_stats(records)

        expected = sum((r.price * r.quantity for r in records), Decimal('0'))
        self.assertEqual(stats.total_value, expected)
        self.assertEqual(stats.formatted_total_value, f"${expected.quantize(Decimal('0.01'), 'ROUND_HALF_UP')}")

    def test_out_of_stock_counts_as_low_stock(self):
        records = seed_products()
        records[4].quantity = 0

        self.assertEqual(compute_stats(records).low_stock_count, 3)

    def test_empty_inventory(self):
        stats = compute_stats([])

        self.assertEqual(stats.total_value, Decimal('0'))
        self.assertEqual(stats.formatted_total_value, '$0.00')
        self.assertEqual(stats.low_stock_count, 0)
        self.assertEqual(stats.record_count, 0)


class RecordEditorTestCase(SimpleTestCase):
    """Test cases for validated create/update/delete."""

    def setUp(self):
        self.storage = MemoryStorage()
        self.store = make_store(self.storage)
        self.editor = RecordEditor(self.store)

    def test_validate_reports_every_field(self):
        with self.assertRaises(ValidationError) as context:
            self.editor.validate({'name': '', 'quantity': -1, 'price': 'abc'})

        self.assertEqual(
            set(context.exception.detail),
            {'barcode', 'name', 'category', 'quantity', 'price'}
        )

    def test_validate_rejects_bad_numbers(self):
        for overrides in [{'quantity': -1}, {'quantity': '4.5'}, {'price': '-0.01'}, {'price': 'free'}]:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValidationError):
                    self.editor.validate(product_form(**overrides))

    def test_validate_bounds_quantity(self):
        with self.assertRaises(ValidationError) as context:
            self.editor.validate(product_form(quantity=MAX_QUANTITY + 1))

        self.assertEqual(set(context.exception.detail), {'quantity'})
        self.assertEqual(self.editor.validate(product_form(quantity=MAX_QUANTITY))['quantity'], MAX_QUANTITY)

    def test_validate_cleans_values(self):
        cleaned = self.editor.validate(product_form(barcode='  77  ', quantity='3'))

        self.assertEqual(cleaned['barcode'], '77')
        self.assertEqual(cleaned['quantity'], 3)
        self.assertEqual(cleaned['price'], Decimal('24.50'))

    def test_add_appends_new_record(self):
        result = self.editor.upsert(product_form())

        self.assertTrue(result.created)
        self.assertTrue(result.change.applied)
        records = self.store.get_all()
        self.assertEqual(len(records), 6)
        self.assertEqual(records[-1].name, 'Desk Lamp')
        self.assertNotEqual(records[-1].id, records[-1].barcode)
        self.assertIn('Desk Lamp', self.storage.values['products'])

    def test_duplicate_barcode_on_add(self):
        """
        Test: Adding a product with an existing barcode is rejected.

        Given: The seed list
        When: Adding a product using the Laptop barcode
        Then: DuplicateIdError is raised and nothing changes
        """
        before = self.store.get_all()

        with self.assertRaises(DuplicateIdError) as context:
            self.editor.upsert(product_form(barcode=LAPTOP))

        self.assertEqual(context.exception.existing_id, LAPTOP)
        self.assertEqual(self.store.get_all(), before)
        self.assertEqual(self.storage.values, {})

    def test_duplicate_barcode_on_edit(self):
        before = self.store.get_all()

        with self.assertRaises(DuplicateIdError):
            self.editor.upsert(product_form(barcode=HEADPHONES), editing_id=LAPTOP)

        self.assertEqual(self.store.get_all(), before)

    def test_edit_may_keep_own_barcode(self):
        result = self.editor.upsert(
            product_form(barcode=LAPTOP, name='Laptop', category='Electronics', quantity=9, price='999.99'),
            editing_id=LAPTOP,
        )

        self.assertFalse(result.created)
        self.assertTrue(result.change.applied)
        self.assertEqual(self.store.get(LAPTOP).quantity, 9)

    def test_edit_preserves_other_records(self):
        others_before = [r for r in self.store.get_all() if r.id != COFFEE_MAKER]

        self.editor.upsert(
            product_form(barcode=COFFEE_MAKER, name='Coffee Maker', quantity=1, price='49.99'),
            editing_id=COFFEE_MAKER,
        )

        others_after = [r for r in self.store.get_all() if r.id != COFFEE_MAKER]
        self.assertEqual(others_after, others_before)
        self.assertEqual(names(self.store.get_all())[2], 'Coffee Maker')

    def test_edit_can_change_barcode(self):
        self.editor.upsert(
            product_form(barcode='NEW-CODE', name='T-Shirt', category='Clothing', quantity=4, price='19.99'),
            editing_id=TSHIRT,
        )

        record = self.store.get(TSHIRT)
        self.assertEqual(record.barcode, 'NEW-CODE')
        self.assertIsNone(self.store.find_by_barcode(TSHIRT))

        # the old barcode is free again
        self.editor.upsert(product_form(barcode=TSHIRT))
        self.assertEqual(len(self.store.get_all()), 6)

    def test_edit_of_vanished_record_is_noop(self):
        result = self.editor.upsert(product_form(), editing_id='gone')

        self.assertFalse(result.change.applied)
        self.assertEqual(len(self.store.get_all()), 5)

    def test_delete(self):
        change = self.editor.delete(TSHIRT)

        self.assertTrue(change.applied)
        self.assertEqual(compute_stats(self.store.get_all()).record_count, 4)

    def test_delete_missing_is_noop(self):
        change = self.editor.delete('missing')

        self.assertFalse(change.applied)
        self.assertEqual(len(self.store.get_all()), 5)


class DashboardTestCase(SimpleTestCase):
    """Test cases for the dashboard workflows."""

    def setUp(self):
        self.store = make_store()
        self.dashboard = Dashboard(self.store, categories=['Electronics', 'Clothing', 'Home', 'Groceries'])

    def test_initial_render(self):
        payload = self.dashboard.render()

        self.assertEqual(len(payload['products']), 5)
        self.assertFalse(payload['empty'])
        self.assertEqual(payload['stats']['record_count'], 5)
        self.assertEqual(payload['stats']['formatted_total_value'], '$15979.20')
        self.assertEqual(payload['editor']['mode'], 'closed')
        self.assertIsNone(payload['pending_delete'])
        self.assertEqual(payload['notifications'], [])

    def test_rows_carry_display_fields(self):
        row = self.dashboard.render()['products'][1]

        self.assertEqual(row['name'], 'T-Shirt')
        self.assertEqual(row['display_price'], '$19.99')
        self.assertEqual(row['stock_status'], 'low_stock')
        self.assertEqual(row['stock_label'], 'Low Stock')

    def test_search_and_filter(self):
        payload = self.dashboard.search('lap')
        self.assertEqual([p['name'] for p in payload['products']], ['Laptop'])

        self.dashboard.search('')
        payload = self.dashboard.filter_by_category('Electronics')
        self.assertEqual([p['name'] for p in payload['products']], ['Laptop', 'Headphones'])

    def test_empty_state(self):
        payload = self.dashboard.search('nothing matches this')

        self.assertTrue(payload['empty'])
        self.assertEqual(payload['empty_message'], 'No products found.')
        self.assertEqual(payload['stats']['record_count'], 5)

    def test_sort_by_toggles(self):
        payload = self.dashboard.sort_by('price')
        self.assertEqual(payload['sort'], {'column': 'price', 'direction': 'asc'})
        self.assertEqual(payload['products'][0]['name'], 'Apples')

        payload = self.dashboard.sort_by('price')
        self.assertEqual(payload['sort']['direction'], 'desc')
        self.assertEqual(payload['products'][0]['name'], 'Laptop')

        payload = self.dashboard.sort_by('name')
        self.assertEqual(payload['sort'], {'column': 'name', 'direction': 'asc'})

    def test_add_product_flow(self):
        payload = self.dashboard.open_add_form()
        self.assertEqual(payload['editor']['mode'], 'add')
        self.assertEqual(payload['editor']['title'], 'Add New Product')
        self.assertEqual(payload['editor']['initial'], {})

        payload = self.dashboard.submit_form(product_form())

        self.assertEqual(payload['editor']['mode'], 'closed')
        self.assertEqual(payload['stats']['record_count'], 6)
        self.assertEqual(payload['notifications'], [
            {'level': 'success', 'message': MESSAGE_ADDED, 'blocking': False}
        ])

    def test_edit_product_flow(self):
        payload = self.dashboard.open_edit_form(LAPTOP)
        self.assertEqual(payload['editor']['title'], 'Edit Product')
        self.assertEqual(payload['editor']['initial'], {
            'barcode': LAPTOP, 'name': 'Laptop', 'category': 'Electronics',
            'quantity': 15, 'price': '999.99',
        })

        payload = self.dashboard.submit_form(
            product_form(barcode=LAPTOP, name='Laptop', category='Electronics', quantity=1, price='999.99')
        )

        self.assertEqual(payload['notifications'][0]['message'], MESSAGE_UPDATED)
        self.assertEqual(payload['stats']['low_stock_count'], 3)

    def test_open_edit_for_missing_record(self):
        payload = self.dashboard.open_edit_form('missing')

        self.assertEqual(payload['editor']['mode'], 'closed')

    def test_submit_invalid_form_marks_it_invalid(self):
        self.dashboard.open_add_form()

        with self.assertRaises(ValidationError):
            self.dashboard.submit_form(product_form(name=''))

        payload = self.dashboard.render()
        self.assertEqual(payload['editor']['mode'], 'add')
        self.assertTrue(payload['editor']['form_invalid'])
        self.assertIn('name', payload['editor']['errors'])
        self.assertEqual(payload['stats']['record_count'], 5)

    def test_submit_duplicate_barcode_alerts(self):
        self.dashboard.open_add_form()

        with self.assertRaises(DuplicateIdError):
            self.dashboard.submit_form(product_form(barcode=APPLES))

        payload = self.dashboard.render()
        self.assertEqual(payload['notifications'], [
            {'level': 'danger', 'message': MESSAGE_DUPLICATE, 'blocking': True}
        ])
        self.assertEqual(payload['editor']['mode'], 'add')
        self.assertEqual(payload['stats']['record_count'], 5)

    def test_submit_without_open_form(self):
        with self.assertRaises(EditorClosedError):
            self.dashboard.submit_form(product_form())

    def test_cancel_form(self):
        self.dashboard.open_edit_form(LAPTOP)

        payload = self.dashboard.cancel_form()

        self.assertEqual(payload['editor']['mode'], 'closed')
        self.assertIsNone(payload['editor']['editing_id'])

    def test_two_step_delete(self):
        """
        Test: Deleting asks for confirmation first.

        Given: The seed list
        When: Requesting then confirming deletion of the T-Shirt
        Then: The confirmation names the product, and the count drops to 4
        """
        payload = self.dashboard.request_delete(TSHIRT)
        self.assertEqual(payload['pending_delete'], {'id': TSHIRT, 'name': 'T-Shirt'})
        self.assertEqual(payload['stats']['record_count'], 5)

        payload = self.dashboard.confirm_delete()

        self.assertIsNone(payload['pending_delete'])
        self.assertEqual(payload['stats']['record_count'], 4)
        self.assertEqual(payload['notifications'], [
            {'level': 'danger', 'message': MESSAGE_DELETED, 'blocking': False}
        ])

    def test_confirm_without_request_is_noop(self):
        payload = self.dashboard.confirm_delete()

        self.assertEqual(payload['stats']['record_count'], 5)
        self.assertEqual(payload['notifications'], [])

    def test_cancel_delete(self):
        self.dashboard.request_delete(TSHIRT)

        payload = self.dashboard.cancel_delete()

        self.assertIsNone(payload['pending_delete'])
        self.assertEqual(payload['stats']['record_count'], 5)

    def test_state_session_round_trip(self):
        self.dashboard.search('e')
        self.dashboard.sort_by('quantity')
        self.dashboard.open_edit_form(HEADPHONES)
        self.dashboard.request_delete(APPLES)

        data = json.loads(json.dumps(self.dashboard.state.to_session()))
        restored = DashboardState.from_session(data)

        self.assertEqual(restored, self.dashboard.state)

    def test_huge_stored_totals_still_render(self):
        """
        Test: Amounts wider than any fixed digit limit render without error.

        Given: Stored products whose value runs to 30 integer digits
        When: Rendering the dashboard and opening the edit form
        Then: Totals and prices are rounded to cents as strings
        """
        self.store.reset([
            ProductRecord.from_dict({
                'id': 'bulk', 'name': 'Bulk', 'category': 'Home',
                'quantity': 10 ** 20, 'price': '9999999999.99',
            }),
        ])
        dashboard = Dashboard(self.store, categories=[])

        payload = dashboard.open_edit_form('bulk')

        total = '999999999999' + '0' * 18 + '.00'
        self.assertEqual(payload['stats']['total_value'], total)
        self.assertEqual(payload['stats']['formatted_total_value'], f'${total}')
        self.assertEqual(payload['products'][0]['price'], '9999999999.99')
        self.assertEqual(payload['editor']['initial']['quantity'], 10 ** 20)

    def test_unusable_session_state_resets(self):
        for data in [None, {}, {'sort': {'column': 'colour'}}, {'sort': 'price'}, {'editor_mode': 'open'}]:
            with self.subTest(data=data):
                state = DashboardState.from_session(data)
                self.assertEqual(state.editor_mode, 'closed')
                self.assertIsNone(state.sort.column)


class InventoryAPITestCase(SimpleTestCase):
    """Test cases for the HTTP surface."""

    def setUp(self):
        self.config = apps.get_app_config('inventory')
        self.original_store = self.config.store
        self.storage = MemoryStorage()
        self.config.store = make_store(self.storage)
        self.client = APIClient()

    def tearDown(self):
        self.config.store = self.original_store

    def test_health_check(self):
        response = self.client.get(reverse('health-check'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'healthy')

    def test_dashboard(self):
        response = self.client.get(reverse('inventory:dashboard'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data['products']), 5)
        self.assertEqual(response.data['categories'], ['Electronics', 'Clothing', 'Home', 'Groceries'])

    def test_criteria_persist_in_session(self):
        self.client.post(reverse('inventory:dashboard-search'), {'term': 'lap'})
        self.client.post(reverse('inventory:dashboard-sort'), {'column': 'price'})

        response = self.client.get(reverse('inventory:dashboard'))

        self.assertEqual(response.data['criteria']['search'], 'lap')
        self.assertEqual(response.data['sort'], {'column': 'price', 'direction': 'asc'})
        self.assertEqual([p['name'] for p in response.data['products']], ['Laptop'])

    def test_category_filter(self):
        response = self.client.post(reverse('inventory:dashboard-filter'), {'category': 'Electronics'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([p['name'] for p in response.data['products']], ['Laptop', 'Headphones'])

    def test_unknown_sort_column(self):
        response = self.client.post(reverse('inventory:dashboard-sort'), {'column': 'colour'})

        self.assertEqual(response.status_code, 400)

    def test_add_product(self):
        self.client.post(reverse('inventory:product-form'))

        response = self.client.post(reverse('inventory:product-form-submit'), product_form())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['stats']['record_count'], 6)
        self.assertEqual(response.data['notifications'][0]['message'], MESSAGE_ADDED)
        self.assertIn('Desk Lamp', self.storage.values['products'])

    def test_edit_product(self):
        self.client.post(reverse('inventory:product-form-edit', args=[HEADPHONES]))

        response = self.client.post(
            reverse('inventory:product-form-submit'),
            product_form(barcode=HEADPHONES, name='Headphones', category='Electronics', quantity=30, price='149.99'),
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.config.store.get(HEADPHONES).quantity, 30)
        self.assertEqual(response.data['stats']['low_stock_count'], 1)

    def test_invalid_form(self):
        self.client.post(reverse('inventory:product-form'))

        response = self.client.post(reverse('inventory:product-form-submit'), product_form(quantity=-3))

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.data['editor']['form_invalid'])
        self.assertIn('quantity', response.data['editor']['errors'])

    def test_duplicate_barcode(self):
        self.client.post(reverse('inventory:product-form'))

        response = self.client.post(reverse('inventory:product-form-submit'), product_form(barcode=LAPTOP))

        self.assertEqual(response.status_code, 409)
        self.assertTrue(response.data['notifications'][0]['blocking'])
        self.assertEqual(self.storage.values, {})

    def test_submit_without_open_form(self):
        response = self.client.post(reverse('inventory:product-form-submit'), product_form())

        self.assertEqual(response.status_code, 409)
        self.assertEqual(len(self.config.store.get_all()), 5)

    def test_cancel_form(self):
        self.client.post(reverse('inventory:product-form'))

        response = self.client.delete(reverse('inventory:product-form'))

        self.assertEqual(response.data['editor']['mode'], 'closed')

    def test_delete_flow(self):
        response = self.client.post(reverse('inventory:delete-request', args=[TSHIRT]))
        self.assertEqual(response.data['pending_delete']['name'], 'T-Shirt')

        response = self.client.post(reverse('inventory:delete-confirm'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['stats']['record_count'], 4)
        self.assertIsNone(self.config.store.get(TSHIRT))

    def test_cancel_delete(self):
        self.client.post(reverse('inventory:delete-request', args=[TSHIRT]))

        self.client.delete(reverse('inventory:delete-cancel'))
        response = self.client.post(reverse('inventory:delete-confirm'))

        self.assertEqual(response.data['stats']['record_count'], 5)

    def test_product_list(self):
        response = self.client.get(
            reverse('inventory:product-list'),
            {'category': 'Electronics', 'sort': 'price', 'direction': 'desc'},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual([p['name'] for p in response.data], ['Laptop', 'Headphones'])

    def test_product_list_search(self):
        response = self.client.get(reverse('inventory:product-list'), {'q': 'LAP'})

        self.assertEqual([p['name'] for p in response.data], ['Laptop'])

    def test_oversized_quantity_is_rejected(self):
        self.client.post(reverse('inventory:product-form'))

        response = self.client.post(
            reverse('inventory:product-form-submit'),
            product_form(barcode='big', quantity=10 ** 20, price='9999999999.99'),
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('quantity', response.data['editor']['errors'])
        self.assertIsNone(self.config.store.find_by_barcode('big'))
        self.assertEqual(self.client.get(reverse('inventory:dashboard')).status_code, 200)

    def test_ids_named_like_actions_are_reachable(self):
        """
        Test: Products whose id is "submit" or "confirm" can be edited and deleted.

        Given: Stored products with ids matching action route segments
        When: Opening the edit form and requesting deletion by id
        Then: The dashboard targets those products
        """
        self.config.store.reset([
            ProductRecord(id='submit', barcode='submit', name='Stapler', category='Home',
                          quantity=2, price=Decimal('4.00')),
            ProductRecord(id='confirm', barcode='confirm', name='Tape', category='Home',
                          quantity=9, price=Decimal('1.50')),
        ])

        response = self.client.post(reverse('inventory:product-form-edit', args=['submit']))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['editor']['editing_id'], 'submit')
        self.assertEqual(response.data['editor']['initial']['name'], 'Stapler')

        response = self.client.post(reverse('inventory:delete-request', args=['confirm']))
        self.assertEqual(response.data['pending_delete'], {'id': 'confirm', 'name': 'Tape'})

        response = self.client.post(reverse('inventory:delete-confirm'))
        self.assertIsNone(self.config.store.get('confirm'))
        self.assertEqual(response.data['stats']['record_count'], 1)

    def test_product_stats(self):
        response = self.client.get(reverse('inventory:product-stats'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total_value'], '15979.20')
        self.assertEqual(response.data['low_stock_count'], 2)
        self.assertEqual(response.data['record_count'], 5)


class SeedDataCommandTestCase(SimpleTestCase):
    """Test cases for the seed_data management command."""

    def setUp(self):
        self.config = apps.get_app_config('inventory')
        self.original_store = self.config.store
        self.storage = MemoryStorage({'products': '[]'})
        self.config.store = make_store(self.storage)

    def tearDown(self):
        self.config.store = self.original_store

    def test_seed(self):
        out = StringIO()
        call_command('seed_data', stdout=out)

        self.assertEqual(len(json.loads(self.storage.values['products'])), 5)
        self.assertIn('Seeded 5 products', out.getvalue())

    def test_clear(self):
        call_command('seed_data', stdout=StringIO())
        call_command('seed_data', '--clear', stdout=StringIO())

        self.assertEqual(self.storage.values['products'], '[]')
        self.assertEqual(self.config.store.get_all(), ())
