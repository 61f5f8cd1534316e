from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.translation import gettext_lazy as _
from erp_core.models import User
from .forms import UserAdminChangeForm, UserAdminCreationForm


# Extend stock `DjangoUserAdmin`
@admin.register(User)  # Hook custom `User` model into Django Admin
class UserAdmin(DjangoUserAdmin):
    # Use custom forms to create/edit views
    add_form = UserAdminCreationForm
    form = UserAdminChangeForm
    model = User

    list_display = ("username", "email", "get_full_name", "role", "contact", "is_active")
    list_filter = ("role", "is_staff", "is_superuser", "is_active")
    search_fields = ("username", "email", "first_name", "last_name", "contact__name")
    ordering = ("username",)

    # Group fields logically on edit user page
    fieldsets = (
        (None, {"fields": ("username", "password")}),
        (_("Personal info"), {"fields": ("first_name", "last_name", "email")}),
        (_("Role / Portal"), {"fields": ("role", "contact", "invite_expires")}),
        # Keep stock Django grouping (`permissions`, `important dates`)
        (
            _("Permissions"),
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                ),
            },
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    # tokens are issued by the invite flow only
    readonly_fields = ("invite_expires",)

    # Control which fields appear when creating a new user in admin
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "username",
                    "email",
                    "role",
                    "contact",
                    "password1",
                    "password2",
                ),
            },
        ),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("contact")
