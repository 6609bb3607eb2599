"""
PATH: accounting/api/views/accounts.py

ACCOUNTS API

GET   /api/accounting/accounts/                 list (?active=true|false|all, ?sub_head=, ?search=)
POST  /api/accounting/accounts/                 create            (accounting.add_account)
GET   /api/accounting/accounts/<id>/            retrieve
PATCH /api/accounting/accounts/<id>/            update            (accounting.change_account)
GET   /api/accounting/accounts/<id>/balance/    ?as_of=YYYY-MM-DD
GET   /api/accounting/accounts/<id>/statement/  ?from_date=&to_date=

Reads require accounting.view_ledgerentry.
Accounts are never hard-deleted; PATCH is_active=false instead.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.responses import VIEW_LEDGER_PERMISSION, forbidden, service_error_response
from accounting.api.serializers.accounts import (
    AccountBalanceSerializer,
    AccountSerializer,
    AccountWriteSerializer,
)
from accounting.api.serializers.reports import AsOfQuerySerializer, RequiredDateRangeQuerySerializer
from accounting.services import balance_service, ledger_store, report_service
from accounting.services.account_service import create_account, search_accounts, update_account
from accounting.services.exceptions import AccountingServiceError
from accounting.statement import balance_label

ACCOUNT_ADD_PERMISSION = "accounting.add_account"
ACCOUNT_CHANGE_PERMISSION = "accounting.change_account"


class AccountListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountWriteSerializer

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(name="active", type=str, required=False, description="true (default), false or all"),
            OpenApiParameter(name="sub_head", type=str, required=False),
            OpenApiParameter(name="search", type=str, required=False, description="Match any word of the account name"),
        ],
        responses=AccountSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view accounts.")

        qp = request.query_params
        active = (qp.get("active") or "true").strip().lower()

        qs = search_accounts(qp.get("search") or "", active_only=False)
        if active in ("true", "1", "yes"):
            qs = qs.filter(is_active=True)
        elif active in ("false", "0", "no"):
            qs = qs.filter(is_active=False)

        sub_head = (qp.get("sub_head") or "").strip().upper()
        if sub_head:
            qs = qs.filter(sub_head=sub_head)

        return Response(AccountSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=AccountWriteSerializer,
        responses={201: AccountSerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(ACCOUNT_ADD_PERMISSION):
            return forbidden("You do not have permission to create accounts.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            account = create_account(user=request.user, **s.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)


class AccountDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountWriteSerializer

    @extend_schema(tags=["accounting"], responses=AccountSerializer)
    def get(self, request, account_id, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view accounts.")

        try:
            account = ledger_store.get_account(account_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=AccountWriteSerializer,
        responses={200: AccountSerializer, 400: dict, 403: dict, 404: dict},
    )
    def patch(self, request, account_id, *args, **kwargs):
        if not request.user.has_perm(ACCOUNT_CHANGE_PERMISSION):
            return forbidden("You do not have permission to update accounts.")

        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            account = update_account(account_id, user=request.user, **s.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)


class AccountBalanceView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountBalanceSerializer

    @extend_schema(
        tags=["accounting"],
        parameters=[AsOfQuerySerializer],
        responses=AccountBalanceSerializer,
    )
    def get(self, request, account_id, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view balances.")

        q = AsOfQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        as_of = q.validated_data.get("as_of")

        try:
            account = ledger_store.get_account(account_id)
            balance = balance_service.account_balance(account.id, as_of=as_of)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        data = {
            "account_id": account.id,
            "account_name": account.account_name,
            "as_of": as_of,
            "balance": balance,
            "label": balance_label(balance),
        }
        return Response(AccountBalanceSerializer(data).data, status=status.HTTP_200_OK)


class AccountStatementView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["accounting"],
        parameters=[RequiredDateRangeQuerySerializer],
        responses={200: dict, 400: dict, 404: dict},
    )
    def get(self, request, account_id, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view ledger statements.")

        q = RequiredDateRangeQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            data = report_service.ledger_report(
                account_id,
                from_date=q.validated_data["from_date"],
                to_date=q.validated_data["to_date"],
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)
