from django.contrib.auth.base_user import BaseUserManager
from django.db import models


# -----------------------------------------
# Soft-delete scoping for master data
# (contacts, products, cost centers, rules, budgets)
# -----------------------------------------
class ActiveQuerySet(models.QuerySet):
    def active(self):
        # only fetch records that have not been soft-deleted
        return self.filter(is_active=True)


class ActiveManager(models.Manager):
    def get_queryset(self):
        return ActiveQuerySet(self.model, using=self._db)

    def active(self):
        return self.get_queryset().active()
    # Enables query:
    # Product.objects.active()


# Auto-analytical rules are always read in evaluation order
class RuleQuerySet(ActiveQuerySet):
    def in_priority_order(self):
        # lower priority number is evaluated first, id breaks ties
        return self.active().order_by("priority", "id")


class RuleManager(ActiveManager):
    def get_queryset(self):
        return RuleQuerySet(self.model, using=self._db)

    def in_priority_order(self):
        return self.get_queryset().in_priority_order()


# -----------------------------------------
# Transactional documents
# (purchase orders, vendor bills, sales orders, invoices)
# -----------------------------------------
class DocumentQuerySet(models.QuerySet):
    def for_counterparty(self, contact):
        # Each concrete model names its counterparty FK (vendor / customer)
        return self.filter(**{self.model.COUNTERPARTY_FIELD: contact})

    def with_status(self, *statuses):
        return self.filter(status__in=statuses)

    def not_cancelled(self):
        return self.exclude(status="cancelled")

    def outstanding(self):
        # posted/sent but not yet fully settled
        return self.filter(
            status__in=[self.model.POSTED_STATUS, "partially_paid"])


class DocumentManager(models.Manager):
    def get_queryset(self):
        return DocumentQuerySet(self.model, using=self._db)

    def for_counterparty(self, contact):
        return self.get_queryset().for_counterparty(contact)

    def outstanding(self):
        return self.get_queryset().outstanding()


""" Enforce rules around how users are created """


class UserManager(BaseUserManager):
    use_in_migrations = True  # Allow Django to serialize this manager in migrations

    # Shared logic for both create_user() & create_superuser()
    def _create_user(self, username, email, password, **extra_fields):
        if not username:  # Username is required
            raise ValueError("The given username must be set")
        # Email is normalized (lowercased domain part)
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        # Password is hashed; None leaves an unusable password (pending invite)
        user.set_password(password)
        user.save(using=self._db)
        return user

    # Safe defaults for regular accounts
    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, email, password, **extra_fields)

    # Superusers must always have full privileges
    # Used by Django when running `createsuperuser`
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "admin")
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True")
        return self._create_user(username, email, password, **extra_fields)
