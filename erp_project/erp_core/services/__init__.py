from .auto_analytical import (CostCenterMatch, apply_auto_analytical,
                              resolve_cost_center)
from .budgets import create_budget, deactivate_budget, revise_budget
from .documents import (create_bill_from_purchase_order, create_document,
                        create_invoice_from_sales_order,
                        update_document_header, update_document_lines)
from .invites import accept_invite, invite_contact
from .lifecycle import cancel_document, confirm_order, post_document
from .payments import delete_payment, record_payment
from .portal import (portal_bills, portal_invoices, portal_pay_invoice,
                     portal_payments)
from .pricing import PricedDocument, price_line, price_lines
from .reconciliation import reconcile_document
from .reports import budget_vs_actual, cost_center_performance
from .sequences import next_sequence
