from .actions import (cancel_documents, confirm_orders, deactivate_budgets,
                      invite_contacts, post_documents)
from .documents import (InvoiceAdmin, PurchaseOrderAdmin, SalesOrderAdmin,
                        VendorBillAdmin)
from .forms import DocumentLineForm, UserAdminChangeForm, UserAdminCreationForm
from .inlines import (BudgetRevisionInline, InvoiceLineInline, PaymentInline,
                      PurchaseOrderLineInline, SalesOrderLineInline,
                      VendorBillLineInline)
from .master import (AnalyticalAccountAdmin, AutoAnalyticalRuleAdmin,
                     ContactAdmin, ProductAdmin, SequenceAdmin)
from .mixins import DocumentAdminMixin
from .ReadOnly import ReadOnlyAdmin
from .records import AuditLogAdmin, BudgetAdmin, PaymentAdmin
from .users import UserAdmin
