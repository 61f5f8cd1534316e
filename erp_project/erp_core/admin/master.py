from django.contrib import admin

from erp_core.models import (AnalyticalAccount, AutoAnalyticalRule, Contact,
                             Product, Sequence)

from .actions import invite_contacts


# Register `Contact` model
@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "contact_type", "email", "phone",
                    "payment_terms_days", "is_active")
    list_filter = ("contact_type", "is_active")
    search_fields = ("code", "name", "email", "gstin")
    readonly_fields = ("code", "created_at")
    actions = [invite_contacts]


# Register `Product` model
@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "category", "unit", "purchase_price",
                    "sale_price", "tax_rate", "analytical_account", "is_active")
    list_filter = ("category", "is_active")
    search_fields = ("code", "name", "hsn_code")
    readonly_fields = ("code", "created_at")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("analytical_account")


@admin.register(AnalyticalAccount)
class AnalyticalAccountAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "parent", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("parent")


@admin.register(AutoAnalyticalRule)
class AutoAnalyticalRuleAdmin(admin.ModelAdmin):
    list_display = ("priority", "name", "product_category", "product_name_contains",
                    "vendor", "analytical_account", "is_active")
    list_display_links = ("name",)
    list_filter = ("is_active", "product_category")
    search_fields = ("name", "product_name_contains")
    ordering = ("priority", "id")  # evaluation order

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("vendor", "analytical_account")


@admin.register(Sequence)
class SequenceAdmin(admin.ModelAdmin):
    list_display = ("name", "prefix", "next_number", "padding")
    # numbers are reserved atomically by the services
    readonly_fields = ("next_number",)
