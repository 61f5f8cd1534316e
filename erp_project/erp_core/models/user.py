from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from ..managers import UserManager

USER_ROLES = [
    ("admin", "Admin"),  # full control over documents and master data
    ("accountant", "Accountant"),  # can post documents, record payments
    ("customer", "Customer"),  # portal: own invoices & payments only
    ("vendor", "Vendor"),  # portal: own bills only
]


# ---------- Custom User ----------
class User(AbstractUser):
    """
    Replace built-in user to add role and the portal contact link.
    'AUTH_USER_MODEL = "erp_core.User"' is set in settings.py
    """

    role = models.CharField(max_length=20, choices=USER_ROLES, default="admin")

    # Portal users are bound to exactly one contact
    contact = models.OneToOneField(
        "Contact",
        null=True,
        blank=True,
        # If the contact is deleted, keep the user but drop the link
        on_delete=models.SET_NULL,
        related_name="user",
    )

    # Invitation flow: user exists without a usable password until accepted
    invite_token = models.CharField(
        max_length=64, null=True, blank=True, unique=True)
    invite_expires = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    class Meta:
        indexes = [models.Index(fields=["role"], name="ix_user_role")]

    # Controls how user is displayed
    def __str__(self):
        # Fall back to username if no name is set
        return self.get_full_name() or self.username

    @property
    def is_back_office(self):
        """Admins, accountants and superusers manage documents."""
        return self.is_superuser or self.role in ("admin", "accountant")

    @property
    def is_portal_user(self):
        return self.role in ("customer", "vendor")

    def invite_is_valid(self, now=None):
        now = now or timezone.now()
        return bool(
            self.invite_token and self.invite_expires and self.invite_expires > now)
