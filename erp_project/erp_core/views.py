import datetime
import functools
import json
import logging

from django.core.exceptions import (ObjectDoesNotExist, PermissionDenied,
                                    ValidationError)
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .models import (Contact, Invoice, Payment, Product, PurchaseOrder,
                     SalesOrder, VendorBill)
from .services import (accept_invite, budget_vs_actual, cancel_document,
                       cost_center_performance, create_bill_from_purchase_order,
                       create_document, create_invoice_from_sales_order,
                       delete_payment, invite_contact, portal_invoices,
                       portal_pay_invoice, portal_payments, post_document,
                       record_payment, resolve_cost_center,
                       update_document_lines)

logger = logging.getLogger(__name__)

# URL segment → document model
DOCUMENT_MODELS = {
    "purchase-orders": PurchaseOrder,
    "vendor-bills": VendorBill,
    "sales-orders": SalesOrder,
    "invoices": Invoice,
}


# ---------- helpers ----------
def json_view(view):
    """Translate service errors into JSON responses."""
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ValidationError as exc:
            return JsonResponse({"ok": False, "errors": exc.messages}, status=400)
        except (ObjectDoesNotExist, Http404) as exc:
            return JsonResponse({"ok": False, "errors": [str(exc) or "Not found"]}, status=404)
        except PermissionDenied as exc:
            return JsonResponse({"ok": False, "errors": [str(exc) or "Forbidden"]}, status=403)
    return wrapper


def back_office(view):
    """Only admins and accountants reach document management views."""
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"ok": False, "errors": ["Authentication required"]}, status=401)
        if not request.user.is_back_office:
            raise PermissionDenied("Back office access only.")
        return view(request, *args, **kwargs)
    return wrapper


def read_json(request):
    if not request.body:
        return {}
    try:
        return json.loads(request.body)
    except ValueError:
        raise ValidationError("Request body must be valid JSON.")


def parse_date(value, field):
    if value in (None, ""):
        return None
    try:
        return datetime.date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a YYYY-MM-DD date.")


def document_model(kind):
    try:
        return DOCUMENT_MODELS[kind]
    except KeyError:
        raise Http404(f"Unknown document type: {kind}")


def header_from(data):
    header = {}
    for field in ("date", "due_date"):
        if field in data:
            header[field] = parse_date(data[field], field)
    for field in ("notes", "vendor_reference"):
        if field in data:
            header[field] = data[field]
    return header


def serialize_document(doc):
    return {
        "id": doc.pk,
        "number": doc.number,
        "status": doc.status,
        "counterparty": {"id": doc.counterparty.pk, "name": doc.counterparty.name},
        "date": doc.date,
        "due_date": doc.due_date,
        "subtotal": doc.subtotal,
        "tax_amount": doc.tax_amount,
        "total_amount": doc.total_amount,
        "paid_amount": doc.paid_amount,
        "outstanding_amount": doc.outstanding_amount,
        "notes": doc.notes,
        "lines": [
            {
                "id": line.pk,
                "product": line.product_id,
                "description": line.description,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "tax_rate": line.tax_rate,
                "tax_amount": line.tax_amount,
                "line_total": line.line_total,
                "analytical_account": line.analytical_account_id,
            }
            for line in doc.lines.all()
        ],
    }


def serialize_payment(payment):
    return {
        "id": payment.pk,
        "number": payment.number,
        "payment_type": payment.payment_type,
        "method": payment.method,
        "contact": payment.contact_id,
        "amount": payment.amount,
        "payment_date": payment.payment_date,
        "reference": payment.reference,
        "invoice": payment.invoice_id,
        "vendor_bill": payment.vendor_bill_id,
    }


# ---------- cost centers ----------
@require_GET
@json_view
@back_office
def resolve_cost_center_view(request):
    product = get_object_or_404(Product, pk=request.GET.get("product"))
    vendor = None
    if request.GET.get("vendor"):
        vendor = get_object_or_404(Contact, pk=request.GET["vendor"])
    match = resolve_cost_center(product, vendor=vendor)
    if match is None:
        return JsonResponse({"analytical_account": None, "rule_name": None})
    return JsonResponse({
        "analytical_account": match.analytical_account.pk,
        "code": match.analytical_account.code,
        "rule_name": match.rule_name,
    })


# ---------- documents ----------
@require_POST
@json_view
@back_office
def document_create_view(request, kind):
    model = document_model(kind)
    data = read_json(request)
    doc = create_document(
        model,
        data.get("counterparty"),
        data.get("lines", []),
        user=request.user,
        post=bool(data.get("post")),
        **header_from(data),
    )
    return JsonResponse({"ok": True, "document": serialize_document(doc)}, status=201)


@require_GET
@json_view
@back_office
def document_detail_view(request, kind, pk):
    doc = get_object_or_404(document_model(kind), pk=pk)
    return JsonResponse({"document": serialize_document(doc)})


@require_http_methods(["POST", "PUT"])
@json_view
@back_office
def document_lines_view(request, kind, pk):
    doc = get_object_or_404(document_model(kind), pk=pk)
    data = read_json(request)
    doc = update_document_lines(doc, data.get("lines", []), user=request.user, **header_from(data))
    return JsonResponse({"ok": True, "document": serialize_document(doc)})


@require_POST
@json_view
@back_office
def document_post_view(request, kind, pk):
    doc = get_object_or_404(document_model(kind), pk=pk)
    doc = post_document(doc, user=request.user)
    return JsonResponse({"ok": True, "status": doc.status})


@require_POST
@json_view
@back_office
def document_cancel_view(request, kind, pk):
    doc = get_object_or_404(document_model(kind), pk=pk)
    doc = cancel_document(doc, user=request.user, reason=read_json(request).get("reason"))
    return JsonResponse({"ok": True, "status": doc.status})


@require_POST
@json_view
@back_office
def purchase_order_bill_view(request, pk):
    order = get_object_or_404(PurchaseOrder, pk=pk)
    bill = create_bill_from_purchase_order(order, user=request.user)
    return JsonResponse({"ok": True, "document": serialize_document(bill)}, status=201)


@require_POST
@json_view
@back_office
def sales_order_invoice_view(request, pk):
    order = get_object_or_404(SalesOrder, pk=pk)
    invoice = create_invoice_from_sales_order(order, user=request.user)
    return JsonResponse({"ok": True, "document": serialize_document(invoice)}, status=201)


# ---------- payments ----------
@require_POST
@json_view
@back_office
def document_payment_view(request, kind, pk):
    doc = get_object_or_404(document_model(kind), pk=pk)
    data = read_json(request)
    payment = record_payment(
        doc,
        amount=data.get("amount"),
        method=data.get("method", "bank_transfer"),
        payment_date=parse_date(data.get("payment_date"), "payment_date"),
        reference=data.get("reference"),
        notes=data.get("notes"),
        user=request.user,
    )
    doc.refresh_from_db()
    return JsonResponse({
        "ok": True,
        "payment": serialize_payment(payment),
        "status": doc.status,
        "paid_amount": doc.paid_amount,
    }, status=201)


@require_http_methods(["DELETE", "POST"])
@json_view
@back_office
def payment_delete_view(request, pk):
    payment = get_object_or_404(Payment, pk=pk)
    doc = delete_payment(payment, user=request.user)
    return JsonResponse({"ok": True, "status": doc.status if doc else None})


# ---------- reports ----------
def _period(request):
    start = parse_date(request.GET.get("start"), "start")
    end = parse_date(request.GET.get("end"), "end")
    if start is None or end is None:
        raise ValidationError("start and end are required.")
    return start, end


@require_GET
@json_view
@back_office
def budget_vs_actual_view(request):
    start, end = _period(request)
    return JsonResponse(budget_vs_actual(start, end, request.GET.get("analytical_account") or None))


@require_GET
@json_view
@back_office
def cost_center_performance_view(request):
    start, end = _period(request)
    return JsonResponse({"cost_centers": cost_center_performance(start, end)})


# ---------- contacts / invitations ----------
@require_POST
@json_view
@back_office
def contact_invite_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk)
    account = invite_contact(contact, user=request.user)
    return JsonResponse({"ok": True, "user": account.pk})


@require_POST
@json_view
def accept_invite_view(request):
    data = read_json(request)
    accept_invite(data.get("token"), data.get("password") or "")
    return JsonResponse({"ok": True})


# ---------- customer portal ----------
@require_GET
@json_view
def portal_invoices_view(request):
    invoices = portal_invoices(request.user)
    return JsonResponse({"invoices": [serialize_document(inv) for inv in invoices]})


@require_GET
@json_view
def portal_payments_view(request):
    return JsonResponse({"payments": [serialize_payment(p) for p in portal_payments(request.user)]})


@require_POST
@json_view
def portal_pay_invoice_view(request, pk):
    data = read_json(request)
    payment = portal_pay_invoice(
        request.user, pk, data.get("amount"),
        method=data.get("method", "upi"), reference=data.get("reference"))
    return JsonResponse({"ok": True, "payment": serialize_payment(payment)}, status=201)
