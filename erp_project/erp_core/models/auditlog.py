from django.conf import settings  # To access global project settings
from django.db import models


# ---------- Audit / Event log ----------
class AuditLog(models.Model):
    # Which user performed the action
    # (Nullable in case the action was automated, e.g. reconciliation or seed)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # Common choices: create, update, post, confirm, cancel, reconcile, invite
    action = models.CharField(max_length=50)
    # (e.g., "Invoice", "Payment", "Budget")
    object_type = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    # Before/after details of what changed, in JSON format
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["object_type", "object_id"], name="ix_audit_object"),
            models.Index(fields=["created_at"], name="ix_audit_created"),
        ]

    def __str__(self):
        time = self.created_at
        return f"[{time:%Y-%m-%d %H:%M}] {self.user} {self.action} {self.object_type}({self.object_id})"
