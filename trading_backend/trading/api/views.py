# trading/api/views.py

"""
TRADE DOCUMENTS API

/api/trading/imports/   /api/trading/exports/   /api/trading/invoices/
    GET  list (?from_date=&to_date=&account=&search=)
    POST create + post to ledger          (trading.add_<model>)
.../<id>/
    GET, PUT/PATCH (reverse + repost)     (trading.change_<model>)
    DELETE (soft delete + reverse)        (trading.delete_<model>)

Reads require accounting.view_ledgerentry.

/api/trading/products/   /api/trading/vehicles/
    GET list (?search=&active=true), POST create   (trading.view_/add_<model>)
.../<id>/
    GET, PUT/PATCH, DELETE (deactivates)           (trading.change_<model>)
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.responses import VIEW_LEDGER_PERMISSION, forbidden, service_error_response
from accounting.api.serializers.reports import DashboardQuerySerializer, DateRangeQuerySerializer
from accounting.services.exceptions import AccountingServiceError
from trading.api.serializers import (
    OUTPUT_SERIALIZERS,
    WRITE_SERIALIZERS,
    DocumentSearchQuerySerializer,
    GoodsReceivedQuerySerializer,
    MasterDataQuerySerializer,
    NextNumberQuerySerializer,
    ProductSerializer,
    ProductWiseReportQuerySerializer,
    ProductWriteSerializer,
    VehicleReportQuerySerializer,
    VehicleSerializer,
    VehicleWriteSerializer,
)
from trading.services import master_data_service, report_service
from trading.services.trade_service import (
    create_trade_entry,
    delete_trade_entry,
    get_entry,
    get_kind,
    list_trade_entries,
    next_invoice_number,
    update_trade_entry,
)


def _permission(kind: str, action: str) -> str:
    model = get_kind(kind).model
    return f"{model._meta.app_label}.{action}_{model._meta.model_name}"


def _write_kwargs(data: dict) -> dict:
    kwargs = dict(data)
    if "account" in kwargs:
        kwargs["account_id"] = kwargs.pop("account")
    return kwargs


class TradeEntryListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    kind = None

    def get_serializer_class(self):
        return WRITE_SERIALIZERS[self.kind]

    @extend_schema(
        tags=["trading"],
        parameters=[
            DateRangeQuerySerializer,
            OpenApiParameter(name="account", type=int, required=False),
            OpenApiParameter(name="search", type=str, required=False, description="Invoice number contains"),
        ],
        responses={200: dict},
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden(f"You do not have permission to view {self.kind} entries.")

        q = DateRangeQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        account_id = request.query_params.get("account")
        if account_id:
            try:
                account_id = int(account_id)
            except (TypeError, ValueError):
                return Response({"detail": "account must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
        else:
            account_id = None

        qs = list_trade_entries(
            self.kind,
            from_date=q.validated_data.get("from_date"),
            to_date=q.validated_data.get("to_date"),
            account_id=account_id,
            search=request.query_params.get("search"),
        )
        return Response(OUTPUT_SERIALIZERS[self.kind](qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["trading"], responses={201: dict, 400: dict, 403: dict})
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(_permission(self.kind, "add")):
            return forbidden(f"You do not have permission to create {self.kind} entries.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            entry = create_trade_entry(self.kind, user=request.user, **_write_kwargs(s.validated_data))
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(OUTPUT_SERIALIZERS[self.kind](entry).data, status=status.HTTP_201_CREATED)


class TradeEntryDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    kind = None

    def get_serializer_class(self):
        return WRITE_SERIALIZERS[self.kind]

    @extend_schema(tags=["trading"], responses={200: dict, 404: dict})
    def get(self, request, entry_id, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden(f"You do not have permission to view {self.kind} entries.")

        try:
            entry = get_entry(self.kind, entry_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(OUTPUT_SERIALIZERS[self.kind](entry).data, status=status.HTTP_200_OK)

    def _update(self, request, entry_id):
        if not request.user.has_perm(_permission(self.kind, "change")):
            return forbidden(f"You do not have permission to edit {self.kind} entries.")

        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            entry = update_trade_entry(self.kind, entry_id, user=request.user, **_write_kwargs(s.validated_data))
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(OUTPUT_SERIALIZERS[self.kind](entry).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["trading"], responses={200: dict, 400: dict, 403: dict, 404: dict})
    def put(self, request, entry_id, *args, **kwargs):
        return self._update(request, entry_id)

    @extend_schema(tags=["trading"], responses={200: dict, 400: dict, 403: dict, 404: dict})
    def patch(self, request, entry_id, *args, **kwargs):
        return self._update(request, entry_id)

    @extend_schema(tags=["trading"], responses={204: None, 403: dict, 404: dict})
    def delete(self, request, entry_id, *args, **kwargs):
        if not request.user.has_perm(_permission(self.kind, "delete")):
            return forbidden(f"You do not have permission to delete {self.kind} entries.")

        try:
            delete_trade_entry(self.kind, entry_id, user=request.user)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)


class NextInvoiceNumberView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["trading"], parameters=[NextNumberQuerySerializer], responses={200: dict})
    def get(self, request):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view trade documents.")

        q = NextNumberQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        kind = q.validated_data["kind"]

        return Response({"kind": kind, "invoice_no": next_invoice_number(kind)}, status=status.HTTP_200_OK)


class VehicleWiseReportView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["trading"], parameters=[VehicleReportQuerySerializer], responses={200: dict})
    def get(self, request):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view reports.")

        q = VehicleReportQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            data = report_service.vehicle_wise_report(**q.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


class DocumentSearchView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["trading"], parameters=[DocumentSearchQuerySerializer], responses={200: dict})
    def get(self, request):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to search trade documents.")

        q = DocumentSearchQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            data = report_service.search_documents(**q.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["trading"], parameters=[DashboardQuerySerializer], responses={200: dict})
    def get(self, request):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view the dashboard.")

        q = DashboardQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            data = report_service.dashboard(day=q.validated_data.get("date"))
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


class ProductWiseReportView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["trading"], parameters=[ProductWiseReportQuerySerializer], responses={200: dict})
    def get(self, request):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view reports.")

        q = ProductWiseReportQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        params = dict(q.validated_data)
        params["product_id"] = params.pop("product")

        try:
            data = report_service.product_wise_report(**params)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


class GoodsReceivedReportView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["trading"], parameters=[GoodsReceivedQuerySerializer], responses={200: dict})
    def get(self, request):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view reports.")

        q = GoodsReceivedQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            data = report_service.goods_received_report(
                from_date=q.validated_data.get("from_date"),
                to_date=q.validated_data.get("to_date"),
                account_id=q.validated_data.get("account"),
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


# ============================================================
# MASTER DATA (PRODUCTS / VEHICLES)
# ============================================================

MASTER_DATA = {
    "product": {
        "output": ProductSerializer,
        "write": ProductWriteSerializer,
        "list": master_data_service.list_products,
        "get": master_data_service.get_product,
        "create": master_data_service.create_product,
        "update": master_data_service.update_product,
        "deactivate": master_data_service.deactivate_product,
    },
    "vehicle": {
        "output": VehicleSerializer,
        "write": VehicleWriteSerializer,
        "list": master_data_service.list_vehicles,
        "get": master_data_service.get_vehicle,
        "create": master_data_service.create_vehicle,
        "update": master_data_service.update_vehicle,
        "deactivate": master_data_service.deactivate_vehicle,
    },
}


def _master_permission(kind: str, action: str) -> str:
    return f"trading.{action}_{kind}"


class MasterDataListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    kind = None

    def get_serializer_class(self):
        return MASTER_DATA[self.kind]["write"]

    @extend_schema(tags=["trading"], parameters=[MasterDataQuerySerializer], responses={200: dict})
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(_master_permission(self.kind, "view")):
            return forbidden(f"You do not have permission to view {self.kind}s.")

        q = MasterDataQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        qs = MASTER_DATA[self.kind]["list"](
            active_only=q.validated_data.get("active", False),
            search=q.validated_data.get("search"),
        )
        return Response(MASTER_DATA[self.kind]["output"](qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["trading"], responses={201: dict, 400: dict, 403: dict})
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(_master_permission(self.kind, "add")):
            return forbidden(f"You do not have permission to create {self.kind}s.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            obj = MASTER_DATA[self.kind]["create"](user=request.user, **s.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(MASTER_DATA[self.kind]["output"](obj).data, status=status.HTTP_201_CREATED)


class MasterDataDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    kind = None

    def get_serializer_class(self):
        return MASTER_DATA[self.kind]["write"]

    @extend_schema(tags=["trading"], responses={200: dict, 404: dict})
    def get(self, request, item_id, *args, **kwargs):
        if not request.user.has_perm(_master_permission(self.kind, "view")):
            return forbidden(f"You do not have permission to view {self.kind}s.")

        try:
            obj = MASTER_DATA[self.kind]["get"](item_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(MASTER_DATA[self.kind]["output"](obj).data, status=status.HTTP_200_OK)

    def _update(self, request, item_id):
        if not request.user.has_perm(_master_permission(self.kind, "change")):
            return forbidden(f"You do not have permission to edit {self.kind}s.")

        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            obj = MASTER_DATA[self.kind]["update"](item_id, user=request.user, **s.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(MASTER_DATA[self.kind]["output"](obj).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["trading"], responses={200: dict, 400: dict, 403: dict, 404: dict})
    def put(self, request, item_id, *args, **kwargs):
        return self._update(request, item_id)

    @extend_schema(tags=["trading"], responses={200: dict, 400: dict, 403: dict, 404: dict})
    def patch(self, request, item_id, *args, **kwargs):
        return self._update(request, item_id)

    @extend_schema(tags=["trading"], responses={200: dict, 403: dict, 404: dict})
    def delete(self, request, item_id, *args, **kwargs):
        if not request.user.has_perm(_master_permission(self.kind, "change")):
            return forbidden(f"You do not have permission to deactivate {self.kind}s.")

        try:
            obj = MASTER_DATA[self.kind]["deactivate"](item_id, user=request.user)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(MASTER_DATA[self.kind]["output"](obj).data, status=status.HTTP_200_OK)
