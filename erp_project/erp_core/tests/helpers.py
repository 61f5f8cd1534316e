import datetime
from decimal import Decimal

from ..models import (AnalyticalAccount, AutoAnalyticalRule, Contact, Product,
                      User)


class ErpFixtureMixin:
    """Master data shared by most tests: cost centers, rules, contacts, products."""

    def setUp(self):
        super().setUp()
        self.today = datetime.date(2026, 3, 15)
        self.prod = AnalyticalAccount.objects.create(code="PROD", name="Production")
        self.sales = AnalyticalAccount.objects.create(code="SALES", name="Sales & Marketing")
        self.admin_cc = AnalyticalAccount.objects.create(code="ADMIN", name="Administration")

        AutoAnalyticalRule.objects.create(
            name="Raw Materials to Production", product_category="raw_material",
            analytical_account=self.prod, priority=1)
        AutoAnalyticalRule.objects.create(
            name="Finished Goods to Sales", product_category="finished_goods",
            analytical_account=self.sales, priority=2)

        self.vendor = Contact.objects.create(
            name="Timber Supplies Ltd.", contact_type="vendor",
            email="supplies@timber.com", payment_terms_days=15)
        self.customer = Contact.objects.create(
            name="Luxury Homes Pvt. Ltd.", contact_type="customer",
            email="purchase@luxuryhomes.com", payment_terms_days=45)
        self.other_customer = Contact.objects.create(
            name="Interior Design Studio", contact_type="customer",
            email="orders@interiordesign.com")

        self.teak = Product.objects.create(
            name="Teak Wood (per cubic ft)", category="raw_material", unit="CFT",
            purchase_price=Decimal("2500"), sale_price=Decimal("3000"), tax_rate=Decimal("18"))
        self.desk = Product.objects.create(
            name="Executive Office Desk", category="finished_goods",
            purchase_price=Decimal("15000"), sale_price=Decimal("25000"), tax_rate=Decimal("18"))
        self.sofa = Product.objects.create(
            name="Premium Sofa Set (3+2)", category="finished_goods", unit="SET",
            purchase_price=Decimal("35000"), sale_price=Decimal("42000"), tax_rate=Decimal("18"))
        self.polish = Product.objects.create(
            name="Wood Polish (Litre)", category="consumables", unit="LTR",
            purchase_price=Decimal("250"), sale_price=Decimal("350"), tax_rate=Decimal("18"))

    # Invoice lines of the worked example: 92000 + 16560 tax = 108560
    def invoice_lines(self):
        return [
            {"product": self.desk, "quantity": 2, "unit_price": "25000", "tax_rate": "18"},
            {"product": self.sofa, "quantity": 1, "unit_price": "42000", "tax_rate": "18"},
        ]

    def make_user(self, username, role="admin", contact=None, **extra):
        return User.objects.create_user(
            username, f"{username}@example.com", "s3cret-pass!", role=role, contact=contact, **extra)
