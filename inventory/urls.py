"""
URL routing for inventory dashboard API endpoints.
"""
from django.urls import path
from . import views

app_name = 'inventory'

urlpatterns = [
    # Dashboard
    path('dashboard/', views.DashboardView.as_view(), name='dashboard'),
    path('dashboard/search/', views.DashboardSearchView.as_view(), name='dashboard-search'),
    path('dashboard/filter/', views.DashboardFilterView.as_view(), name='dashboard-filter'),
    path('dashboard/sort/', views.DashboardSortView.as_view(), name='dashboard-sort'),

    # Product form
    path('dashboard/form/', views.ProductFormView.as_view(), name='product-form'),
    path('dashboard/form/submit/', views.ProductFormSubmitView.as_view(), name='product-form-submit'),
    path('dashboard/form/edit/<str:record_id>/', views.ProductEditFormView.as_view(), name='product-form-edit'),

    # Delete confirmation
    path('dashboard/delete/', views.DeleteCancelView.as_view(), name='delete-cancel'),
    path('dashboard/delete/confirm/', views.DeleteConfirmView.as_view(), name='delete-confirm'),
    path('dashboard/delete/request/<str:record_id>/', views.DeleteRequestView.as_view(), name='delete-request'),

    # Products
    path('products/', views.ProductListView.as_view(), name='product-list'),
    path('products/stats/', views.ProductStatsView.as_view(), name='product-stats'),
]
