import logging

from django.db import transaction
from django.db.models import F

from ..models import Sequence

logger = logging.getLogger(__name__)

# name → (prefix, first number, padding); created on first use
DEFAULT_SEQUENCES = {
    "purchase_order": ("PO", 1001, 5),
    "vendor_bill": ("BILL", 1001, 5),
    "sales_order": ("SO", 1001, 5),
    "invoice": ("INV", 1001, 5),
    "payment": ("PAY", 1001, 5),
    "contact": ("C", 1001, 5),
    "product": ("P", 1001, 5),
}


def ensure_sequence(name: str) -> Sequence:
    if name not in DEFAULT_SEQUENCES:
        # unknown names still work, prefixed with their own upper-cased name
        prefix, start, padding = name.upper()[:10], 1001, 5
    else:
        prefix, start, padding = DEFAULT_SEQUENCES[name]
    seq, created = Sequence.objects.get_or_create(
        name=name,
        defaults={"prefix": prefix, "next_number": start, "padding": padding},
    )
    if created:
        logger.info("Created sequence %s starting at %s", name, start)
    return seq


def next_sequence(name: str) -> str:
    """
    Reserve the next number of sequence `name` and return it formatted,
    e.g. next_sequence("invoice") -> "INV-01001".
    The increment is one UPDATE statement, so two concurrent callers
    never receive the same number; the reserved value is read back
    from the locked row inside the same transaction.
    """
    with transaction.atomic():
        updated = Sequence.objects.filter(name=name).update(
            next_number=F("next_number") + 1)
        if not updated:
            ensure_sequence(name)
            Sequence.objects.filter(name=name).update(
                next_number=F("next_number") + 1)
        seq = Sequence.objects.select_for_update().get(name=name)
        # next_number now points past the reserved value
        return seq.format(seq.next_number - 1)
