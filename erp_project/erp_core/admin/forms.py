from django import forms
from django.contrib.auth.forms import (
    UserChangeForm as DjangoUserChangeForm,
    UserCreationForm as DjangoUserCreationForm)
from erp_core.models import AnalyticalAccount, User
from erp_core.services.auto_analytical import resolve_cost_center
from erp_core.services.pricing import validate_line_values

# -----------------------------
# Register custom admin forms
# ----------------------------


# Subclass `DjangoUserCreationForm` (form used when adding a new user)
class UserAdminCreationForm(DjangoUserCreationForm):
    class Meta(DjangoUserCreationForm.Meta):
        model = User  # Points `model` to custom User model
        fields = ("username", "email", "role", "contact")


# Subclass `DjangoUserChangeForm` (form used when editing an existing user)
class UserAdminChangeForm(DjangoUserChangeForm):
    class Meta(DjangoUserChangeForm.Meta):
        model = User
        fields = (
            "username",
            "email",
            "role",
            "contact",
            "is_active",
            "is_staff",
            "is_superuser",
        )


# Base form for every document line inline; the inline supplies the model
class DocumentLineForm(forms.ModelForm):

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # only active cost centers can be picked for new assignments
        if "analytical_account" in self.fields:
            self.fields["analytical_account"].queryset = AnalyticalAccount.objects.active()

    def document_vendor(self, cleaned):
        # the inline formset puts the parent document under its FK name
        document = cleaned.get(self._meta.model.DOCUMENT_FIELD)
        if document is None or document.COUNTERPARTY_FIELD != "vendor" or not document.vendor_id:
            return None
        return document.vendor

    def clean(self):
        cleaned = super().clean()
        quantity = cleaned.get("quantity")
        unit_price = cleaned.get("unit_price")
        tax_rate = cleaned.get("tax_rate")
        if None not in (quantity, unit_price, tax_rate):
            validate_line_values(quantity, unit_price, tax_rate)

        # Lines left without a cost center get one from the rules
        product = cleaned.get("product")
        if product and not cleaned.get("analytical_account"):
            match = resolve_cost_center(product, vendor=self.document_vendor(cleaned))
            if match is not None:
                cleaned["analytical_account"] = match.analytical_account
                self.instance.analytical_account = match.analytical_account
        return cleaned
