from django.db import models


# ---------- Document number sequences ----------
class Sequence(models.Model):
    """
    Shared counter behind human-readable numbers ("INV-01001").
    Only services.sequences.next_sequence() increments it,
    with a single UPDATE so concurrent creators never get the same number.
    """

    name = models.CharField(max_length=50, unique=True)  # e.g. "invoice"
    prefix = models.CharField(max_length=10)  # e.g. "INV"
    next_number = models.PositiveIntegerField(default=1001)
    padding = models.PositiveSmallIntegerField(default=5)  # 1001 → "01001"

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return f"{self.name}: {self.format(self.next_number)} (next)"

    def format(self, number):
        return f"{self.prefix}-{str(number).zfill(self.padding)}"
