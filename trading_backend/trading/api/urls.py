# trading/api/urls.py

from django.urls import path

from trading.api.views import (
    DashboardView,
    DocumentSearchView,
    GoodsReceivedReportView,
    MasterDataDetailView,
    MasterDataListCreateView,
    NextInvoiceNumberView,
    ProductWiseReportView,
    TradeEntryDetailView,
    TradeEntryListCreateView,
    VehicleWiseReportView,
)

urlpatterns = [
    path("imports/", TradeEntryListCreateView.as_view(kind="import"), name="trading-imports"),
    path("imports/<int:entry_id>/", TradeEntryDetailView.as_view(kind="import"), name="trading-import-detail"),
    path("exports/", TradeEntryListCreateView.as_view(kind="export"), name="trading-exports"),
    path("exports/<int:entry_id>/", TradeEntryDetailView.as_view(kind="export"), name="trading-export-detail"),
    path("invoices/", TradeEntryListCreateView.as_view(kind="invoice"), name="trading-invoices"),
    path("invoices/<int:entry_id>/", TradeEntryDetailView.as_view(kind="invoice"), name="trading-invoice-detail"),
    path("next-number/", NextInvoiceNumberView.as_view(), name="trading-next-number"),
    # Master data
    path("products/", MasterDataListCreateView.as_view(kind="product"), name="trading-products"),
    path("products/<int:item_id>/", MasterDataDetailView.as_view(kind="product"), name="trading-product-detail"),
    path("vehicles/", MasterDataListCreateView.as_view(kind="vehicle"), name="trading-vehicles"),
    path("vehicles/<int:item_id>/", MasterDataDetailView.as_view(kind="vehicle"), name="trading-vehicle-detail"),
    # Reports
    path("reports/vehicle-wise/", VehicleWiseReportView.as_view(), name="trading-vehicle-report"),
    path("reports/product-wise/", ProductWiseReportView.as_view(), name="trading-product-report"),
    path("reports/goods-received/", GoodsReceivedReportView.as_view(), name="trading-goods-received-report"),
    path("search/", DocumentSearchView.as_view(), name="trading-search"),
    path("dashboard/", DashboardView.as_view(), name="trading-dashboard"),
]
