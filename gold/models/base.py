from django.db import models

from gold.exceptions import ImmutableRecordError

QUANTITY_MAX_DIGITS = 18
QUANTITY_DECIMAL_PLACES = 4
AMOUNT_MAX_DIGITS = 24
AMOUNT_DECIMAL_PLACES = 4


class BaseModel(models.Model):
    """
    Abstract base model providing common timestamp fields.

    Mutable ledger rows (branches, holdings) inherit from this to get
    consistent created_at / updated_at tracking.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]


class AppendOnlyModel(models.Model):
    """
    Abstract base for audit records that are written once and never changed.

    ``created_at`` is the event timestamp. Saving an existing row or
    deleting any row raises ImmutableRecordError; bulk queryset updates
    are not used anywhere in the ledger.
    """

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["-created_at", "-id"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(
                f"{type(self).__name__}#{self.pk} is append-only and cannot be updated"
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(
            f"{type(self).__name__}#{self.pk} is append-only and cannot be deleted"
        )
