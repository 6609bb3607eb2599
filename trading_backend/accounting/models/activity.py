# accounting/models/activity.py

from __future__ import annotations

from django.db import models


class ActivityLog(models.Model):
    """
    Append-only audit trail of user-visible changes.

    Written best-effort after the primary operation; never part of its transaction.
    """

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    ACTIONS = [
        (CREATE, "Create"),
        (UPDATE, "Update"),
        (DELETE, "Delete"),
    ]

    ENTITY_ACCOUNT = "ACCOUNT"
    ENTITY_CASHBOOK = "CASHBOOK"
    ENTITY_IMPORT = "IMPORT"
    ENTITY_EXPORT = "EXPORT"
    ENTITY_INVOICE = "INVOICE"
    ENTITY_PRODUCT = "PRODUCT"
    ENTITY_VEHICLE = "VEHICLE"

    ENTITIES = [
        (ENTITY_ACCOUNT, "Account"),
        (ENTITY_CASHBOOK, "Cashbook"),
        (ENTITY_IMPORT, "Import"),
        (ENTITY_EXPORT, "Export"),
        (ENTITY_INVOICE, "Invoice"),
        (ENTITY_PRODUCT, "Product"),
        (ENTITY_VEHICLE, "Vehicle"),
    ]

    action = models.CharField(max_length=6, choices=ACTIONS)
    entity = models.CharField(max_length=10, choices=ENTITIES)
    entity_id = models.CharField(max_length=64, blank=True, default="")
    description = models.CharField(max_length=255, blank=True, default="")
    performed_by = models.CharField(max_length=150, default="System")
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Activity Log"
        verbose_name_plural = "Activity Logs"
        indexes = [
            models.Index(fields=["entity", "entity_id"], name="acct_activity_entity_idx"),
            models.Index(fields=["created_at"], name="acct_activity_created_idx"),
        ]

    def __str__(self):
        return f"{self.action} {self.entity} {self.entity_id} by {self.performed_by}"
