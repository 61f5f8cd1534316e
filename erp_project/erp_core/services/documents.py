import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import DocumentLocked
from ..models import (AnalyticalAccount, Contact, Invoice, Product,
                      PurchaseOrder, SalesOrder, VendorBill)
from .audit_helper import log_action
from .auto_analytical import apply_auto_analytical
from .lifecycle import ensure_lines_editable, lock_document, post_document
from .pricing import price_lines
from .reconciliation import reconcile_document

logger = logging.getLogger(__name__)

# Header fields callers may set on create/update
HEADER_FIELDS = ("date", "due_date", "notes", "vendor_reference")

# Documents that can be raised from an order, and the FK pointing back at it
ORIGIN_FIELDS = {VendorBill: "purchase_order", Invoice: "sales_order"}


def line_model_for(model):
    """Concrete line model and its FK name, e.g. Invoice → (InvoiceLine, "invoice")."""
    rel = model._meta.get_field("lines")
    return rel.related_model, rel.field.name


def is_purchase_side(model):
    return model.COUNTERPARTY_FIELD == "vendor"


def check_counterparty(model, contact):
    if not contact.is_active:
        raise ValidationError(f"{contact} is inactive.")
    if is_purchase_side(model) and not contact.is_vendor:
        raise ValidationError(f"{contact} is not a vendor.")
    if not is_purchase_side(model) and not contact.is_customer:
        raise ValidationError(f"{contact} is not a customer.")


def _resolve(model, value, label):
    if value is None or isinstance(value, model):
        return value
    try:
        return model.objects.get(pk=value)
    except model.DoesNotExist:
        raise ValidationError(f"Unknown {label}: {value}")


def prepare_lines(model, counterparty, lines):
    """
    Normalise raw line input into mappings the pricer and rule engine accept.
    Each input line needs `product` (instance or pk) and `quantity`;
    unit_price and tax_rate default from the product (purchase price on the
    purchase side, sale price on the sales side).
    """
    prepared = []
    for raw in lines:
        product = _resolve(Product, raw.get("product"), "product")
        if product is None:
            raise ValidationError("Every line needs a product.")
        default_price = product.purchase_price if is_purchase_side(model) else product.sale_price
        unit_price = raw.get("unit_price")
        tax_rate = raw.get("tax_rate")
        prepared.append({
            "product": product,
            "description": raw.get("description") or None,
            "quantity": raw.get("quantity"),
            "unit_price": default_price if unit_price in (None, "") else unit_price,
            "tax_rate": product.tax_rate if tax_rate in (None, "") else tax_rate,
            "analytical_account": _resolve(
                AnalyticalAccount, raw.get("analytical_account"), "cost center"),
        })
    vendor = counterparty if is_purchase_side(model) else None
    return apply_auto_analytical(prepared, vendor=vendor)


def _write_lines(document, prepared, priced):
    """Bulk insert lines already priced by the pricer (save() is bypassed)."""
    line_model, fk_name = line_model_for(type(document))
    line_model.objects.bulk_create([
        line_model(
            **{fk_name: document},
            product=line["product"],
            description=line["description"],
            quantity=p.quantity,
            unit_price=p.unit_price,
            tax_rate=p.tax_rate,
            tax_amount=p.tax_amount,
            line_total=p.line_total,
            analytical_account=line["analytical_account"],
        )
        for line, p in zip(prepared, priced.lines)
    ])
    document.subtotal = priced.subtotal
    document.tax_amount = priced.tax_amount
    document.total_amount = priced.total_amount


def _apply_header(document, header):
    for field, value in header.items():
        if field not in HEADER_FIELDS or not hasattr(document, field):
            raise ValidationError(f"Unknown document field: {field}")
        setattr(document, field, value)


# ----------------------------------------------
# Create
# ----------------------------------------------
def create_document(model, counterparty, lines, user=None, post=False, origin=None, **header):
    """
    Create a purchase order, vendor bill, sales order or invoice.
    Workflow:
        1. Validate counterparty and every line (nothing is written on error).
        2. Fill missing cost centers from auto-analytical rules.
        3. Price lines and aggregate totals.
        4. Insert header (numbered from its sequence) + lines atomically.
        5. Optionally post/confirm right away.
    `origin` links a bill to its purchase order / an invoice to its sales order.
    """
    counterparty = _resolve(Contact, counterparty, "contact")
    if counterparty is None:
        raise ValidationError("A counterparty is required.")
    check_counterparty(model, counterparty)

    prepared = prepare_lines(model, counterparty, lines)
    priced = price_lines(prepared)

    with transaction.atomic():
        document = model(**{model.COUNTERPARTY_FIELD: counterparty})
        _apply_header(document, header)
        if origin is not None:
            if model not in ORIGIN_FIELDS:
                raise ValidationError(f"{model.__name__} cannot be created from an order.")
            setattr(document, ORIGIN_FIELDS[model], origin)
        document.full_clean(exclude=["number"])
        document.save()
        _write_lines(document, prepared, priced)
        document.save(update_fields=["subtotal", "tax_amount", "total_amount", "updated_at"])

        log_action(
            action="create",
            instance=document,
            user=user,
            changes={"total_amount": str(document.total_amount), "lines": len(prepared)},
        )
        if post:
            document = post_document(document, user=user)

    logger.info("Created %s for %s: total %s", document, counterparty, document.total_amount)
    return document


# ----------------------------------------------
# Update
# ----------------------------------------------
def update_document_lines(document, lines, user=None, **header):
    """
    Replace all lines of a document (and optionally header fields).
    Allowed for drafts, and for bills/invoices that have no payments.
    Old lines are removed and new ones inserted in one transaction.
    """
    with transaction.atomic():
        doc = lock_document(document)
        ensure_lines_editable(doc)
        prepared = prepare_lines(type(doc), doc.counterparty, lines)
        priced = price_lines(prepared)
        if doc.status != "draft" and not prepared:
            raise ValidationError(f"{doc} is {doc.status} and needs at least one line.")

        previous_total = doc.total_amount
        _apply_header(doc, header)
        doc.lines.all().delete()
        _write_lines(doc, prepared, priced)
        doc.full_clean()
        doc.save()
        if doc.IS_PAYABLE and doc.status != "draft":
            # a new total can move a settled zero-total document back to posted/sent
            doc = reconcile_document(doc)

        log_action(
            action="update",
            instance=doc,
            user=user,
            changes={
                "total_amount": [str(previous_total), str(doc.total_amount)],
                "lines": len(prepared),
            },
        )
    return doc


def update_document_header(document, user=None, **header):
    """Edit header-only fields (date, due date, notes) without touching lines."""
    with transaction.atomic():
        doc = lock_document(document)
        if doc.status == "cancelled":
            raise DocumentLocked(f"{doc} is cancelled.")
        _apply_header(doc, header)
        doc.full_clean()
        doc.save()
        log_action(
            action="update",
            instance=doc,
            user=user,
            changes={k: str(v) for k, v in header.items()},
        )
    return doc


# ----------------------------------------------
# Order → bill / invoice
# ----------------------------------------------
def _lines_from(order):
    return [
        {
            "product": line.product,
            "description": line.description,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "tax_rate": line.tax_rate,
            "analytical_account": line.analytical_account,
        }
        for line in order.lines.select_related("product", "analytical_account")
    ]


def _create_from_order(order, target_model, user=None, **header):
    with transaction.atomic():
        # the stored status decides, not the caller's copy
        order = lock_document(order)
        if order.status != "confirmed":
            raise ValidationError(f"{order} must be confirmed first.")
        return create_document(
            target_model,
            order.counterparty,
            _lines_from(order),
            user=user,
            origin=order,
            **header,
        )


def create_bill_from_purchase_order(order: PurchaseOrder, user=None, **header) -> VendorBill:
    """Copy a confirmed purchase order into a new draft vendor bill."""
    return _create_from_order(order, VendorBill, user=user, **header)


def create_invoice_from_sales_order(order: SalesOrder, user=None, **header) -> Invoice:
    """Copy a confirmed sales order into a new draft invoice."""
    return _create_from_order(order, Invoice, user=user, **header)
