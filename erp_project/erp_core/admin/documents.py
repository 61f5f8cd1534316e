from django.contrib import admin
from django.db.models import Prefetch

from erp_core.models import (Invoice, InvoiceLine, PurchaseOrder,
                             PurchaseOrderLine, SalesOrder, SalesOrderLine,
                             VendorBill, VendorBillLine)

from .actions import cancel_documents, confirm_orders, post_documents
from .inlines import (InvoiceLineInline, PaymentInline,
                      PurchaseOrderLineInline, SalesOrderLineInline,
                      VendorBillLineInline)
from .mixins import DocumentAdminMixin


def _with_lines(qs, line_model):
    """
    Fetch lines with their product & cost center in bulk,
    so list/detail pages don't query per line.
    """
    return qs.prefetch_related(
        Prefetch("lines", queryset=line_model.objects.select_related(
            "product", "analytical_account"))
    )


# ---------- Purchase side ----------
@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(DocumentAdminMixin, admin.ModelAdmin):
    list_display = ("number", "vendor", "date", "due_date", "status", "total_amount")
    search_fields = ("number", "vendor__name")
    inlines = [PurchaseOrderLineInline]
    actions = [confirm_orders, cancel_documents]
    autocomplete_fields = ("vendor",)

    def get_queryset(self, request):
        qs = super().get_queryset(request).select_related("vendor")
        return _with_lines(qs, PurchaseOrderLine)


@admin.register(VendorBill)
class VendorBillAdmin(DocumentAdminMixin, admin.ModelAdmin):
    list_display = (
        "number",
        "vendor",
        "vendor_reference",
        "date",
        "due_date",
        "status",
        "total_amount",
        "paid_amount",
    )
    search_fields = ("number", "vendor_reference", "vendor__name")
    inlines = [VendorBillLineInline, PaymentInline]
    actions = [post_documents, cancel_documents]
    autocomplete_fields = ("vendor", "purchase_order")

    def get_queryset(self, request):
        qs = super().get_queryset(request).select_related("vendor", "purchase_order")
        return _with_lines(qs, VendorBillLine)


# ---------- Sales side ----------
@admin.register(SalesOrder)
class SalesOrderAdmin(DocumentAdminMixin, admin.ModelAdmin):
    list_display = ("number", "customer", "date", "due_date", "status", "total_amount")
    search_fields = ("number", "customer__name")
    inlines = [SalesOrderLineInline]
    actions = [confirm_orders, cancel_documents]
    autocomplete_fields = ("customer",)

    def get_queryset(self, request):
        qs = super().get_queryset(request).select_related("customer")
        return _with_lines(qs, SalesOrderLine)


@admin.register(Invoice)
class InvoiceAdmin(DocumentAdminMixin, admin.ModelAdmin):
    list_display = (
        "number",
        "customer",
        "date",
        "due_date",
        "status",
        "total_amount",
        "paid_amount",
    )
    search_fields = ("number", "customer__name")
    inlines = [InvoiceLineInline, PaymentInline]
    actions = [post_documents, cancel_documents]
    autocomplete_fields = ("customer", "sales_order")

    def get_queryset(self, request):
        qs = super().get_queryset(request).select_related("customer", "sales_order")
        return _with_lines(qs, InvoiceLine)
