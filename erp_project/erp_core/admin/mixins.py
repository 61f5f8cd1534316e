from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db import transaction


class DocumentAdminMixin:
    """
    Shared admin behaviour for purchase orders, vendor bills,
    sales orders and invoices.
    - totals, paid amount and number are computed, never typed in
    - status moves only through the lifecycle actions
    - locked documents (payments linked, cancelled, confirmed orders) are read-only
    """

    list_filter = ("status", "date")
    date_hierarchy = "date"
    readonly_fields = (
        "number",
        "status",
        "subtotal",
        "tax_amount",
        "total_amount",
        "paid_amount",
        "created_at",
        "updated_at",
    )

    def get_readonly_fields(self, request, obj=None):
        # Once lines can't change, the whole header is frozen too
        if obj and not obj.lines_are_editable():
            return [f.name for f in self.model._meta.fields]
        return super().get_readonly_fields(request, obj)

    def has_delete_permission(self, request, obj=None):
        # only untouched drafts are deleted; everything else is cancelled
        if obj and obj.status != "draft":
            return False
        return super().has_delete_permission(request, obj)

    def run_service(self, request, queryset, service, verb, done):
        """Apply a lifecycle service to each selected document in its own transaction."""
        docs = list(queryset)  # statuses change while we loop
        success = 0
        for doc in docs:
            try:
                with transaction.atomic():
                    service(doc, user=request.user)
                success += 1
            except ValidationError as exc:
                self.message_user(
                    request, f"Could not {verb} {doc}: {'; '.join(exc.messages)}",
                    level=messages.ERROR)
        self.message_user(
            request,
            f"{done} {success} of {len(docs)} documents.",
            level=messages.SUCCESS if success == len(docs) else messages.WARNING,
        )
