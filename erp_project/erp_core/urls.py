from django.urls import path

from . import views

app_name = "erp_core"

urlpatterns = [
    path("cost-centers/resolve/", views.resolve_cost_center_view, name="resolve-cost-center"),
    path("purchase-orders/<int:pk>/bill/", views.purchase_order_bill_view, name="purchase-order-bill"),
    path("sales-orders/<int:pk>/invoice/", views.sales_order_invoice_view, name="sales-order-invoice"),
    path("payments/<int:pk>/delete/", views.payment_delete_view, name="payment-delete"),
    path("reports/budget-vs-actual/", views.budget_vs_actual_view, name="budget-vs-actual"),
    path("reports/cost-center-performance/", views.cost_center_performance_view,
         name="cost-center-performance"),
    path("contacts/<int:pk>/invite/", views.contact_invite_view, name="contact-invite"),
    path("portal/accept-invite/", views.accept_invite_view, name="accept-invite"),
    path("portal/invoices/", views.portal_invoices_view, name="portal-invoices"),
    path("portal/invoices/<int:pk>/pay/", views.portal_pay_invoice_view, name="portal-pay-invoice"),
    path("portal/payments/", views.portal_payments_view, name="portal-payments"),
    # documents: kind is purchase-orders | vendor-bills | sales-orders | invoices
    path("<str:kind>/", views.document_create_view, name="document-create"),
    path("<str:kind>/<int:pk>/", views.document_detail_view, name="document-detail"),
    path("<str:kind>/<int:pk>/lines/", views.document_lines_view, name="document-lines"),
    path("<str:kind>/<int:pk>/post/", views.document_post_view, name="document-post"),
    path("<str:kind>/<int:pk>/cancel/", views.document_cancel_view, name="document-cancel"),
    path("<str:kind>/<int:pk>/payments/", views.document_payment_view, name="document-payment"),
]
