import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
import erp_core.managers
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


PRODUCT_CATEGORIES = [
    ("raw_material", "Raw material"),
    ("finished_goods", "Finished goods"),
    ("consumables", "Consumables"),
    ("services", "Services"),
    ("other", "Other"),
]
ORDER_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("confirmed", "Confirmed"),
    ("cancelled", "Cancelled"),
]
BILL_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("posted", "Posted"),
    ("partially_paid", "Partially paid"),
    ("paid", "Paid"),
    ("cancelled", "Cancelled"),
]
INVOICE_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("sent", "Sent"),
    ("partially_paid", "Partially paid"),
    ("paid", "Paid"),
    ("cancelled", "Cancelled"),
]


def document_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("number", models.CharField(blank=True, max_length=32, unique=True)),
        ("date", models.DateField(default=django.utils.timezone.localdate)),
        ("due_date", models.DateField(blank=True, null=True)),
        ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
        ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
        ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
        ("paid_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
        ("notes", models.TextField(blank=True, null=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def line_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("description", models.TextField(blank=True, null=True)),
        ("quantity", models.DecimalField(decimal_places=4, default=Decimal("1"), max_digits=14)),
        ("unit_price", models.DecimalField(decimal_places=4, default=Decimal("0.00"), max_digits=18)),
        ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Percentage, e.g. 18 for 18%", max_digits=6)),
        ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
        ("line_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
        ("analytical_account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="erp_core.analyticalaccount")),
        ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="erp_core.product")),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        # ---------- master data ----------
        migrations.CreateModel(
            name="AnalyticalAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("parent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="children", to="erp_core.analyticalaccount")),
            ],
            options={"ordering": ("code",)},
        ),
        migrations.CreateModel(
            name="Contact",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(blank=True, max_length=32, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("contact_type", models.CharField(choices=[("customer", "Customer"), ("vendor", "Vendor"), ("both", "Customer & vendor")], default="customer", max_length=10)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("address", models.TextField(blank=True)),
                ("city", models.CharField(blank=True, max_length=100)),
                ("state", models.CharField(blank=True, max_length=100)),
                ("country", models.CharField(default="India", max_length=100)),
                ("pincode", models.CharField(blank=True, max_length=16)),
                ("gstin", models.CharField(blank=True, max_length=20)),
                ("credit_limit", models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ("payment_terms_days", models.PositiveIntegerField(default=30)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ("name",),
                "indexes": [
                    models.Index(fields=["contact_type"], name="ix_contact_type"),
                    models.Index(fields=["name"], name="ix_contact_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Sequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50, unique=True)),
                ("prefix", models.CharField(max_length=10)),
                ("next_number", models.PositiveIntegerField(default=1001)),
                ("padding", models.PositiveSmallIntegerField(default=5)),
            ],
            options={"ordering": ("name",)},
        ),
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("username", models.CharField(error_messages={"unique": "A user with that username already exists."}, help_text="Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.", max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name="username")),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email address")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("role", models.CharField(choices=[("admin", "Admin"), ("accountant", "Accountant"), ("customer", "Customer"), ("vendor", "Vendor")], default="admin", max_length=20)),
                ("invite_token", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("invite_expires", models.DateTimeField(blank=True, null=True)),
                ("contact", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="user", to="erp_core.contact")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "abstract": False,
                "indexes": [models.Index(fields=["role"], name="ix_user_role")],
            },
            managers=[
                ("objects", erp_core.managers.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["object_type", "object_id"], name="ix_audit_object"),
                    models.Index(fields=["created_at"], name="ix_audit_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(blank=True, max_length=32, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("category", models.CharField(choices=PRODUCT_CATEGORIES, default="other", max_length=20)),
                ("unit", models.CharField(default="PCS", max_length=16)),
                ("purchase_price", models.DecimalField(decimal_places=4, default=Decimal("0.00"), max_digits=18)),
                ("sale_price", models.DecimalField(decimal_places=4, default=Decimal("0.00"), max_digits=18)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                ("hsn_code", models.CharField(blank=True, max_length=16, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("analytical_account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="products", to="erp_core.analyticalaccount")),
            ],
            options={
                "ordering": ("name",),
                "indexes": [
                    models.Index(fields=["category"], name="ix_product_category"),
                    models.Index(fields=["name"], name="ix_product_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AutoAnalyticalRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("product_category", models.CharField(blank=True, choices=PRODUCT_CATEGORIES, max_length=20, null=True)),
                ("product_name_contains", models.CharField(blank=True, max_length=200, null=True)),
                ("priority", models.PositiveIntegerField(default=1)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("analytical_account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="rules", to="erp_core.analyticalaccount")),
                ("vendor", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="analytical_rules", to="erp_core.contact")),
            ],
            options={
                "ordering": ("priority", "id"),
                "indexes": [models.Index(fields=["is_active", "priority"], name="ix_rule_active_priority")],
            },
        ),
        # ---------- budgets ----------
        migrations.CreateModel(
            name="Budget",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("period_start", models.DateField()),
                ("period_end", models.DateField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("revised_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("analytical_account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="budgets", to="erp_core.analyticalaccount")),
            ],
            options={
                "ordering": ("-period_start", "analytical_account__code"),
                "constraints": [
                    models.UniqueConstraint(fields=("analytical_account", "period_start", "period_end"), name="uq_budget_cost_center_period"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BudgetRevision",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("previous_amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("new_amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("reason", models.TextField(blank=True, null=True)),
                ("revised_at", models.DateTimeField(auto_now_add=True)),
                ("budget", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="revisions", to="erp_core.budget")),
                ("revised_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ("-revised_at", "-id")},
        ),
        # ---------- purchase side ----------
        migrations.CreateModel(
            name="PurchaseOrder",
            fields=document_fields() + [
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, default="draft", max_length=20)),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="purchase_orders", to="erp_core.contact")),
            ],
            options={
                "ordering": ("-date", "-id"),
                "abstract": False,
                "indexes": [
                    models.Index(fields=["vendor", "status"], name="ix_po_vendor_status"),
                    models.Index(fields=["date"], name="ix_po_date"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrderLine",
            fields=line_fields() + [
                ("purchase_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="erp_core.purchaseorder")),
            ],
            options={"ordering": ("id",), "abstract": False},
        ),
        migrations.CreateModel(
            name="VendorBill",
            fields=document_fields() + [
                ("vendor_reference", models.CharField(blank=True, max_length=64, null=True)),
                ("status", models.CharField(choices=BILL_STATUS_CHOICES, default="draft", max_length=20)),
                ("purchase_order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="vendor_bills", to="erp_core.purchaseorder")),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="vendor_bills", to="erp_core.contact")),
            ],
            options={
                "ordering": ("-date", "-id"),
                "abstract": False,
                "indexes": [
                    models.Index(fields=["vendor", "status"], name="ix_bill_vendor_status"),
                    models.Index(fields=["date"], name="ix_bill_date"),
                ],
            },
        ),
        migrations.CreateModel(
            name="VendorBillLine",
            fields=line_fields() + [
                ("vendor_bill", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="erp_core.vendorbill")),
            ],
            options={"ordering": ("id",), "abstract": False},
        ),
        # ---------- sales side ----------
        migrations.CreateModel(
            name="SalesOrder",
            fields=document_fields() + [
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, default="draft", max_length=20)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales_orders", to="erp_core.contact")),
            ],
            options={
                "ordering": ("-date", "-id"),
                "abstract": False,
                "indexes": [
                    models.Index(fields=["customer", "status"], name="ix_so_customer_status"),
                    models.Index(fields=["date"], name="ix_so_date"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SalesOrderLine",
            fields=line_fields() + [
                ("sales_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="erp_core.salesorder")),
            ],
            options={"ordering": ("id",), "abstract": False},
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=document_fields() + [
                ("status", models.CharField(choices=INVOICE_STATUS_CHOICES, default="draft", max_length=20)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="invoices", to="erp_core.contact")),
                ("sales_order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="invoices", to="erp_core.salesorder")),
            ],
            options={
                "ordering": ("-date", "-id"),
                "abstract": False,
                "indexes": [
                    models.Index(fields=["customer", "status"], name="ix_inv_customer_status"),
                    models.Index(fields=["date"], name="ix_inv_date"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceLine",
            fields=line_fields() + [
                ("invoice", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="erp_core.invoice")),
            ],
            options={"ordering": ("id",), "abstract": False},
        ),
        # ---------- payments ----------
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.CharField(blank=True, max_length=32, unique=True)),
                ("payment_type", models.CharField(choices=[("inbound", "Inbound (customer pays us)"), ("outbound", "Outbound (we pay a vendor)")], max_length=10)),
                ("method", models.CharField(choices=[("cash", "Cash"), ("cheque", "Cheque"), ("bank_transfer", "Bank transfer"), ("card", "Card"), ("upi", "UPI"), ("other", "Other")], default="bank_transfer", max_length=20)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("payment_date", models.DateField(default=django.utils.timezone.localdate)),
                ("reference", models.CharField(blank=True, max_length=100, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("contact", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="erp_core.contact")),
                ("invoice", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="erp_core.invoice")),
                ("vendor_bill", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="erp_core.vendorbill")),
            ],
            options={
                "ordering": ("-payment_date", "-id"),
                "indexes": [models.Index(fields=["contact", "payment_date"], name="ix_payment_contact_date")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="ck_payment_amount_positive"),
                    models.CheckConstraint(condition=models.Q(("invoice__isnull", True), ("vendor_bill__isnull", True), _connector="OR"), name="ck_payment_single_document"),
                ],
            },
        ),
    ]
