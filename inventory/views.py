"""
Inventory Dashboard API Views.

Implements:
- Session-backed dashboard actions (search, filter, sort, product form,
  two-step delete), each answering with the re-rendered dashboard
- Stateless product listing and summary statistics
"""
import logging

from django.apps import apps
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .dashboard import Dashboard, DashboardState, EditorClosedError
from .query import SortState, view
from .serializers import (
    CategoryFilterSerializer,
    InventoryStatsSerializer,
    ProductQuerySerializer,
    ProductRowSerializer,
    SearchSerializer,
    SortSerializer,
)
from .services import DuplicateIdError, ValidationError
from .stats import compute_stats

logger = logging.getLogger(__name__)

SESSION_KEY = 'inventory_dashboard'


def get_store():
    return apps.get_app_config('inventory').store


# =============================================================================
# Dashboard Views
# =============================================================================

class DashboardMixin:
    """Loads the session's dashboard state and stores it back after acting."""

    def get_dashboard(self, request):
        state = DashboardState.from_session(request.session.get(SESSION_KEY))
        return Dashboard(get_store(), state)

    def respond(self, request, dashboard, payload, status_code=status.HTTP_200_OK):
        request.session[SESSION_KEY] = dashboard.state.to_session()
        return Response(payload, status=status_code)


class DashboardView(DashboardMixin, APIView):
    """
    GET: Current table, stats, form and delete-confirmation state
    """

    def get(self, request):
        dashboard = self.get_dashboard(request)
        return self.respond(request, dashboard, dashboard.render())


class DashboardSearchView(DashboardMixin, APIView):
    """
    POST: Set the name search term

    Request Body: {"term": "lap"}
    """

    def post(self, request):
        serializer = SearchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dashboard = self.get_dashboard(request)
        payload = dashboard.search(serializer.validated_data['term'])
        return self.respond(request, dashboard, payload)


class DashboardFilterView(DashboardMixin, APIView):
    """
    POST: Set the category filter (empty string shows all)

    Request Body: {"category": "Electronics"}
    """

    def post(self, request):
        serializer = CategoryFilterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dashboard = self.get_dashboard(request)
        payload = dashboard.filter_by_category(serializer.validated_data['category'])
        return self.respond(request, dashboard, payload)


class DashboardSortView(DashboardMixin, APIView):
    """
    POST: Sort by a column; repeating the same column flips the direction

    Request Body: {"column": "price"}
    """

    def post(self, request):
        serializer = SortSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dashboard = self.get_dashboard(request)
        payload = dashboard.sort_by(serializer.validated_data['column'])
        return self.respond(request, dashboard, payload)


class ProductFormView(DashboardMixin, APIView):
    """
    POST: Open an empty "add product" form
    DELETE: Close the form without saving
    """

    def post(self, request):
        dashboard = self.get_dashboard(request)
        return self.respond(request, dashboard, dashboard.open_add_form())

    def delete(self, request):
        dashboard = self.get_dashboard(request)
        return self.respond(request, dashboard, dashboard.cancel_form())


class ProductEditFormView(DashboardMixin, APIView):
    """
    POST: Open the form pre-filled with an existing product
    """

    def post(self, request, record_id):
        dashboard = self.get_dashboard(request)
        return self.respond(request, dashboard, dashboard.open_edit_form(record_id))


class ProductFormSubmitView(DashboardMixin, APIView):
    """
    POST: Save the open form

    Request Body:
    {
        "barcode": "4006381333931",
        "name": "Desk Lamp",
        "category": "Home",
        "quantity": 12,
        "price": "24.50"
    }

    Returns:
        - 200: Saved, form closed
        - 400: Form invalid, field errors in editor.errors
        - 409: Barcode already used, or no form open
    """

    def post(self, request):
        dashboard = self.get_dashboard(request)

        try:
            payload = dashboard.submit_form(request.data)
        except ValidationError as e:
            logger.info(f"Product form rejected: {e.detail}")
            return self.respond(
                request, dashboard, dashboard.render(), status.HTTP_400_BAD_REQUEST
            )
        except DuplicateIdError as e:
            logger.warning(f"Product form rejected: {e}")
            return self.respond(
                request, dashboard, dashboard.render(), status.HTTP_409_CONFLICT
            )
        except EditorClosedError as e:
            return self.respond(
                request,
                dashboard,
                {'error': 'Conflict', 'detail': str(e)},
                status.HTTP_409_CONFLICT,
            )
        except Exception as e:
            logger.exception(f"Unexpected error saving product: {e}")
            return Response(
                {'error': 'Server Error', 'detail': 'An unexpected error occurred'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return self.respond(request, dashboard, payload)


class DeleteRequestView(DashboardMixin, APIView):
    """
    POST: Ask for confirmation before deleting a product
    """

    def post(self, request, record_id):
        dashboard = self.get_dashboard(request)
        return self.respond(request, dashboard, dashboard.request_delete(record_id))


class DeleteConfirmView(DashboardMixin, APIView):
    """
    POST: Delete the product awaiting confirmation
    """

    def post(self, request):
        dashboard = self.get_dashboard(request)
        return self.respond(request, dashboard, dashboard.confirm_delete())


class DeleteCancelView(DashboardMixin, APIView):
    """
    DELETE: Dismiss the delete confirmation
    """

    def delete(self, request):
        dashboard = self.get_dashboard(request)
        return self.respond(request, dashboard, dashboard.cancel_delete())


# =============================================================================
# Product Views
# =============================================================================

class ProductListView(APIView):
    """
    GET: Filtered and sorted products.

    Query Parameters:
        - q: Case-insensitive substring of the product name
        - category: Exact category
        - sort: barcode, name, category, quantity or price
        - direction: asc (default) or desc
    """

    def get(self, request):
        serializer = ProductQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        sort = SortState(params.get('sort'), params['direction'])
        products = view(
            get_store().get_all(),
            search_term=params['q'],
            category=params['category'],
            sort=sort,
        )
        return Response(ProductRowSerializer(products, many=True).data)


class ProductStatsView(APIView):
    """
    GET: Total inventory value, low stock count and product count
    """

    def get(self, request):
        stats = compute_stats(get_store().get_all())
        return Response(InventoryStatsSerializer(stats).data)
