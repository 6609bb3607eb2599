# PATH: accounting/api/view.py

"""
PATH: accounting/api/view.py

ACCOUNTING API VIEWSETS (READ-ONLY / AUDIT SAFE)

- Ledger entries and activity logs are strictly read-only
- Permission-gated via Django permissions:
    ledger entries  → accounting.view_ledgerentry
    activity logs   → accounting.view_activitylog
- Lightweight filtering:
    /api/accounting/ledger-entries/?account=28
    /api/accounting/ledger-entries/?reference_type=CASHBOOK&reference_id=12
    /api/accounting/ledger-entries/?include_deleted=true
    /api/accounting/activity-logs/?entity=CASHBOOK
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import ReadOnlyModelViewSet

from accounting.api.serializers import ActivityLogSerializer, LedgerEntrySerializer
from accounting.models.activity import ActivityLog
from accounting.models.ledger import LedgerEntry


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(name="account", type=int, required=False, description="Filter by Account id."),
        OpenApiParameter(name="reference_type", type=str, required=False),
        OpenApiParameter(name="reference_id", type=str, required=False),
        OpenApiParameter(
            name="include_deleted",
            type=bool,
            required=False,
            description="Include reversed (soft-deleted) postings. Default: false",
        ),
    ],
)
class LedgerEntryViewSet(ReadOnlyModelViewSet):
    """
    Read-only access to ledger entries, newest first.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = LedgerEntrySerializer
    http_method_names = ["get", "head", "options"]

    queryset = LedgerEntry.objects.select_related("account")

    def get_queryset(self):
        if not self.request.user.has_perm("accounting.view_ledgerentry"):
            raise PermissionDenied("You do not have permission to view ledger entries.")

        qs = super().get_queryset()
        qp = self.request.query_params

        if (qp.get("include_deleted") or "").strip().lower() not in ("1", "true", "yes"):
            qs = qs.filter(is_deleted=False)

        account = qp.get("account")
        if account:
            try:
                qs = qs.filter(account_id=int(account))
            except (TypeError, ValueError):
                qs = qs.none()

        reference_type = (qp.get("reference_type") or "").strip().upper()
        if reference_type:
            qs = qs.filter(reference_type=reference_type)

        reference_id = (qp.get("reference_id") or "").strip()
        if reference_id:
            qs = qs.filter(reference_id=reference_id)

        return qs.order_by("-entry_date", "-created_at", "-id")


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(name="entity", type=str, required=False),
        OpenApiParameter(name="entity_id", type=str, required=False),
    ],
)
class ActivityLogViewSet(ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = ActivityLogSerializer
    http_method_names = ["get", "head", "options"]

    queryset = ActivityLog.objects.all()

    def get_queryset(self):
        if not self.request.user.has_perm("accounting.view_activitylog"):
            raise PermissionDenied("You do not have permission to view activity logs.")

        qs = super().get_queryset()
        qp = self.request.query_params

        entity = (qp.get("entity") or "").strip().upper()
        if entity:
            qs = qs.filter(entity=entity)

        entity_id = (qp.get("entity_id") or "").strip()
        if entity_id:
            qs = qs.filter(entity_id=entity_id)

        return qs.order_by("-created_at", "-id")
