from .analytical import PRODUCT_CATEGORIES, AnalyticalAccount, AutoAnalyticalRule
from .auditlog import AuditLog
from .budget import Budget, BudgetRevision
from .contact import Contact
from .document import Document, DocumentLine
from .payment import Payment
from .product import Product
from .purchase import (PurchaseOrder, PurchaseOrderLine, VendorBill,
                       VendorBillLine)
from .sales import Invoice, InvoiceLine, SalesOrder, SalesOrderLine
from .sequence import Sequence
from .user import User
