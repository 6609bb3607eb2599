"""
PATH: accounting/api/views/reports.py

ACCOUNTING REPORTS API (READ-ONLY)

GET /api/accounting/reports/accounts-balance/   ?as_of=&sub_head=
GET /api/accounting/reports/sub-head-balance/
GET /api/accounting/reports/credit-debit/       ?from_date=&to_date=&type=all|credit|debit
GET /api/accounting/reports/cashbook/           ?account=&from_date=&to_date=
GET /api/accounting/reports/cash-in-hand/       ?from_date=&to_date=

All require accounting.view_ledgerentry. Reports are data only (no export formats).
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.responses import VIEW_LEDGER_PERMISSION, forbidden, service_error_response
from accounting.api.serializers.reports import (
    AccountsBalanceQuerySerializer,
    CashbookReportQuerySerializer,
    CreditDebitQuerySerializer,
    DateRangeQuerySerializer,
)
from accounting.services import report_service
from accounting.services.exceptions import AccountingServiceError


class _ReportView(APIView):
    permission_classes = [IsAuthenticated]
    query_serializer_class = None

    def build(self, params: dict) -> dict:
        raise NotImplementedError

    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_LEDGER_PERMISSION):
            return forbidden("You do not have permission to view reports.")

        params = {}
        if self.query_serializer_class is not None:
            q = self.query_serializer_class(data=request.query_params)
            q.is_valid(raise_exception=True)
            params = q.validated_data

        try:
            data = self.build(params)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


@extend_schema(tags=["accounting-reports"], parameters=[AccountsBalanceQuerySerializer], responses={200: dict})
class AccountsBalanceReportView(_ReportView):
    query_serializer_class = AccountsBalanceQuerySerializer

    def build(self, params):
        return report_service.accounts_balance_report(
            sub_head=params.get("sub_head"),
            as_of=params.get("as_of"),
        )


@extend_schema(tags=["accounting-reports"], responses={200: dict})
class SubHeadBalanceReportView(_ReportView):
    def build(self, params):
        return report_service.sub_head_balance_report()


@extend_schema(tags=["accounting-reports"], parameters=[CreditDebitQuerySerializer], responses={200: dict})
class CreditDebitReportView(_ReportView):
    query_serializer_class = CreditDebitQuerySerializer

    def build(self, params):
        return report_service.credit_debit_report(
            from_date=params.get("from_date"),
            to_date=params.get("to_date"),
            report_type=params.get("type") or "all",
        )


@extend_schema(tags=["accounting-reports"], parameters=[CashbookReportQuerySerializer], responses={200: dict})
class CashbookReportView(_ReportView):
    query_serializer_class = CashbookReportQuerySerializer

    def build(self, params):
        return report_service.cashbook_report(
            params["account"],
            from_date=params.get("from_date"),
            to_date=params.get("to_date"),
        )


@extend_schema(tags=["accounting-reports"], parameters=[DateRangeQuerySerializer], responses={200: dict})
class CashInHandView(_ReportView):
    query_serializer_class = DateRangeQuerySerializer

    def build(self, params):
        return report_service.cash_in_hand_report(
            from_date=params.get("from_date"),
            to_date=params.get("to_date"),
        )
