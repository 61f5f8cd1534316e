import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from erp_core.models import (AnalyticalAccount, AutoAnalyticalRule, Budget,
                             Contact, Invoice, Product, PurchaseOrder,
                             SalesOrder, VendorBill)
from erp_core.services import (confirm_order, create_budget, create_document,
                               post_document, record_payment)
from erp_core.services.sequences import ensure_sequence, DEFAULT_SEQUENCES

COST_CENTERS = [
    ("PROD", "Production", "Production department cost center"),
    ("SALES", "Sales & Marketing", "Sales and marketing cost center"),
    ("ADMIN", "Administration", "General administration cost center"),
    ("WAREHOUSE", "Warehouse", "Warehouse and logistics cost center"),
    ("RND", "Research & Development", "R&D cost center"),
]

# (name, category, target cost center, priority)
RULES = [
    ("Raw Materials to Production", "raw_material", "PROD", 1),
    ("Finished Goods to Sales", "finished_goods", "SALES", 2),
    ("Consumables to Administration", "consumables", "ADMIN", 3),
]

BUDGETS = {
    "PROD": Decimal("5000000"),  # 50 lakhs
    "SALES": Decimal("2000000"),
    "ADMIN": Decimal("1000000"),
    "WAREHOUSE": Decimal("1500000"),
    "RND": Decimal("800000"),
}

CONTACTS = [
    dict(name="Timber Supplies Ltd.", contact_type="vendor", email="supplies@timber.com",
         phone="9876543210", address="123 Industrial Area", city="Delhi", state="Delhi",
         gstin="07AAAAA0000A1Z5", payment_terms_days=30),
    dict(name="Hardware World", contact_type="vendor", email="info@hardwareworld.com",
         phone="9876543211", address="456 Market Street", city="Mumbai",
         state="Maharashtra", gstin="27BBBBB0000B1Z5", payment_terms_days=15),
    dict(name="Luxury Homes Pvt. Ltd.", contact_type="customer",
         email="purchase@luxuryhomes.com", phone="9876543220", address="789 Business Park",
         city="Bangalore", state="Karnataka", gstin="29CCCCC0000C1Z5",
         credit_limit=Decimal("1000000"), payment_terms_days=45),
    dict(name="Interior Design Studio", contact_type="customer",
         email="orders@interiordesign.com", phone="9876543221",
         address="321 Design District", city="Chennai", state="Tamil Nadu",
         gstin="33DDDDD0000D1Z5", credit_limit=Decimal("500000"), payment_terms_days=30),
]

# (name, category, unit, purchase, sale, hsn, default cost center)
PRODUCTS = [
    ("Teak Wood (per cubic ft)", "raw_material", "CFT", "2500", "3000", "4403", "PROD"),
    ("Plywood Sheet (8x4)", "raw_material", "PCS", "1200", "1500", "4412", "PROD"),
    ("Executive Office Desk", "finished_goods", "PCS", "15000", "25000", "9403", "SALES"),
    ("Premium Sofa Set (3+2)", "finished_goods", "SET", "35000", "55000", "9401", "SALES"),
    ("Dining Table with 6 Chairs", "finished_goods", "SET", "25000", "42000", "9403", "SALES"),
    ("Wood Polish (Litre)", "consumables", "LTR", "250", "350", "3208", "ADMIN"),
]


class Command(BaseCommand):
    help = "Seeds the database with demo master data, budgets and sample documents."

    # Define command-line argument
    def add_arguments(self, parser):
        parser.add_argument(
            "--admin-password",
            type=str,
            default="admin123",
            help="Password for the demo admin user (default: admin123)",
        )
        parser.add_argument(
            "--skip-documents",
            action="store_true",
            help="Only create master data and budgets",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.NOTICE("Seeding demo data..."))

        for name in DEFAULT_SEQUENCES:
            ensure_sequence(name)

        centers = {}
        for code, name, description in COST_CENTERS:
            centers[code], _ = AnalyticalAccount.objects.get_or_create(
                code=code, defaults={"name": name, "description": description})

        for name, category, code, priority in RULES:
            AutoAnalyticalRule.objects.get_or_create(
                name=name,
                defaults={
                    "product_category": category,
                    "analytical_account": centers[code],
                    "priority": priority,
                },
            )

        year = timezone.localdate().year
        start, end = datetime.date(year, 1, 1), datetime.date(year, 12, 31)
        for code, amount in BUDGETS.items():
            if not Budget.objects.filter(
                    analytical_account=centers[code], period_start=start, period_end=end).exists():
                create_budget(
                    name=f"{centers[code].name} Budget {year}",
                    analytical_account=centers[code],
                    period_start=start,
                    period_end=end,
                    amount=amount,
                )

        contacts = []
        for data in CONTACTS:
            contact = Contact.objects.filter(name=data["name"]).first()
            if contact is None:
                contact = Contact(**data)
                contact.save()
            contacts.append(contact)
        vendor, _, customer, _ = contacts

        products = []
        for name, category, unit, purchase, sale, hsn, code in PRODUCTS:
            product = Product.objects.filter(name=name).first()
            if product is None:
                product = Product(
                    name=name, category=category, unit=unit,
                    purchase_price=Decimal(purchase), sale_price=Decimal(sale),
                    tax_rate=Decimal("18"), hsn_code=hsn, analytical_account=centers[code])
                product.save()
            products.append(product)

        User = get_user_model()
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser(
                "admin", "admin@shivfurniture.com", options["admin_password"],
                first_name="System", last_name="Administrator")
        if not User.objects.filter(username="customer").exists():
            User.objects.create_user(
                "customer", "customer@example.com", "customer123",
                role="customer", contact=customer, first_name="Luxury Homes")

        if not options["skip_documents"] and not PurchaseOrder.objects.exists():
            self._seed_documents(vendor, customer, products)

        self.stdout.write(self.style.SUCCESS("Demo data seeded successfully!"))

    def _seed_documents(self, vendor, customer, products):
        teak, _, desk, sofa, _, _ = products

        order = create_document(PurchaseOrder, vendor, [{"product": teak, "quantity": 10}])
        confirm_order(order)
        bill = create_document(VendorBill, vendor, [{"product": teak, "quantity": 10}],
                               origin=order, vendor_reference="TS-4567")
        post_document(bill)

        sales_order = create_document(SalesOrder, customer, [
            {"product": desk, "quantity": 2},
            {"product": sofa, "quantity": 1, "unit_price": "47000"},
        ])
        confirm_order(sales_order)
        invoice = create_document(Invoice, customer, [
            {"product": desk, "quantity": 2},
            {"product": sofa, "quantity": 1, "unit_price": "47000"},
        ], origin=sales_order, post=True)
        record_payment(invoice, amount="50000", method="bank_transfer", reference="UTR-0001")

        self.stdout.write(f"Created {order}, {bill}, {sales_order} and {invoice}.")
