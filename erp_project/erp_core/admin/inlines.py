from django.contrib import admin

from erp_core.models import (BudgetRevision, InvoiceLine, Payment,
                             PurchaseOrderLine, SalesOrderLine, VendorBillLine)

from .forms import DocumentLineForm

# ---------- Helpful inline admin classes ----------


class DocumentLineInline(admin.TabularInline):
    """Lines on a document page; totals are computed on save."""

    form = DocumentLineForm
    extra = 0  # don't show "empty" rows by default (prevents clutter)
    fields = (
        "product",
        "description",
        "quantity",
        "unit_price",
        "tax_rate",
        "analytical_account",
        "tax_amount",
        "line_total",
    )
    # always computed from quantity, price and rate
    readonly_fields = ("tax_amount", "line_total")
    autocomplete_fields = ("product",)
    ordering = ("id",)  # lines appear in creation order

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("product", "analytical_account")

    # Locked documents show their lines but refuse edits
    def get_readonly_fields(self, request, obj=None):
        if obj and not obj.lines_are_editable():
            return self.fields
        return super().get_readonly_fields(request, obj)

    def has_add_permission(self, request, obj=None):
        if obj and not obj.lines_are_editable():
            return False
        return super().has_add_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj and not obj.lines_are_editable():
            return False
        return super().has_delete_permission(request, obj)


class PurchaseOrderLineInline(DocumentLineInline):
    model = PurchaseOrderLine


class VendorBillLineInline(DocumentLineInline):
    model = VendorBillLine


class SalesOrderLineInline(DocumentLineInline):
    model = SalesOrderLine


class InvoiceLineInline(DocumentLineInline):
    model = InvoiceLine


class PaymentInline(admin.TabularInline):
    """Payments settling a bill/invoice (read-only: corrections are delete + recreate)."""

    model = Payment
    extra = 0
    fields = ("number", "payment_date", "method", "amount", "reference")
    readonly_fields = fields
    can_delete = False
    show_change_link = True  # each row has a link to full detail page

    def has_add_permission(self, request, obj=None):
        return False


class BudgetRevisionInline(admin.TabularInline):
    model = BudgetRevision
    extra = 0
    fields = ("revised_at", "previous_amount", "new_amount", "reason", "revised_by")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False
