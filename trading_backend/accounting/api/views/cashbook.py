"""
PATH: accounting/api/views/cashbook.py

CASHBOOK API

GET    /api/accounting/cashbook/         ?from_date=&to_date=&account=&pay_status=
POST   /api/accounting/cashbook/         create + post           (accounting.add_cashbookentry)
GET    /api/accounting/cashbook/<id>/
PUT    /api/accounting/cashbook/<id>/    edit: reverse + repost  (accounting.change_cashbookentry)
PATCH  /api/accounting/cashbook/<id>/    same as PUT, partial
DELETE /api/accounting/cashbook/<id>/    soft delete + reverse   (accounting.delete_cashbookentry)

Every write is one DB transaction with its ledger posting.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.responses import VIEW_LEDGER_PERMISSION, forbidden, service_error_response
from accounting.api.serializers.cashbook import CashbookEntrySerializer, CashbookEntryWriteSerializer
from accounting.api.serializers.reports import DateRangeQuerySerializer
from accounting.services.cashbook_service import (
    create_cashbook_entry,
    delete_cashbook_entry,
    get_entry,
    list_cashbook_entries,
    update_cashbook_entry,
)
from accounting.services.exceptions import AccountingServiceError

CASHBOOK_ADD_PERMISSION = "accounting.add_cashbookentry"
CASHBOOK_CHANGE_PERMISSION = "accounting.change_cashbookentry"
CASHBOOK_DELETE_PERMISSION = "accounting.delete_cashbookentry"


def _write_kwargs(data: dict) -> dict:
    kwargs = dict(data)
    if "account" in kwargs:
        kwargs["account_id"] = kwargs.pop("account")
    return kwargs


class CashbookListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CashbookEntryWriteSerializer

    @extend_schema(
        tags=["accounting"],
        parameters=[
            DateRangeQuerySerializer,
            OpenApiParameter(name="account", type=int, required=False),
            OpenApiParameter(name="pay_status", type=str, required=False, description="CREDIT or DEBIT"),
        ],
        responses=CashbookEntrySerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view the cashbook.")

        q = DateRangeQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        account_id = request.query_params.get("account")
        if account_id:
            try:
                account_id = int(account_id)
            except (TypeError, ValueError):
                return Response(
                    {"detail": "account must be an integer"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
        else:
            account_id = None

        qs = list_cashbook_entries(
            from_date=q.validated_data.get("from_date"),
            to_date=q.validated_data.get("to_date"),
            account_id=account_id,
            pay_status=request.query_params.get("pay_status"),
        )
        return Response(CashbookEntrySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=CashbookEntryWriteSerializer,
        responses={201: CashbookEntrySerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(CASHBOOK_ADD_PERMISSION):
            return forbidden("You do not have permission to post cashbook entries.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            entry = create_cashbook_entry(user=request.user, **_write_kwargs(s.validated_data))
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(CashbookEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class CashbookDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CashbookEntryWriteSerializer

    @extend_schema(tags=["accounting"], responses=CashbookEntrySerializer)
    def get(self, request, entry_id, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view the cashbook.")

        try:
            entry = get_entry(entry_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(CashbookEntrySerializer(entry).data, status=status.HTTP_200_OK)

    def _update(self, request, entry_id):
        if not request.user.has_perm(CASHBOOK_CHANGE_PERMISSION):
            return forbidden("You do not have permission to edit cashbook entries.")

        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            entry = update_cashbook_entry(entry_id, user=request.user, **_write_kwargs(s.validated_data))
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(CashbookEntrySerializer(entry).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=CashbookEntryWriteSerializer,
        responses={200: CashbookEntrySerializer, 400: dict, 403: dict, 404: dict},
    )
    def put(self, request, entry_id, *args, **kwargs):
        return self._update(request, entry_id)

    @extend_schema(
        tags=["accounting"],
        request=CashbookEntryWriteSerializer,
        responses={200: CashbookEntrySerializer, 400: dict, 403: dict, 404: dict},
    )
    def patch(self, request, entry_id, *args, **kwargs):
        return self._update(request, entry_id)

    @extend_schema(tags=["accounting"], responses={204: None, 403: dict, 404: dict})
    def delete(self, request, entry_id, *args, **kwargs):
        if not request.user.has_perm(CASHBOOK_DELETE_PERMISSION):
            return forbidden("You do not have permission to delete cashbook entries.")

        try:
            delete_cashbook_entry(entry_id, user=request.user)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)
