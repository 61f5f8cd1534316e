from django.core.exceptions import ObjectDoesNotExist, ValidationError


class InvalidLineValue(ValidationError):
    """Raised when a line has a non-positive quantity or a negative price/tax rate."""
    pass


class DocumentLocked(ValidationError):
    """Raised when lines are changed on a document outside its editable states."""
    pass


class DocumentNotFound(ObjectDoesNotExist):
    """Raised when a referenced document id does not exist."""
    pass


class PaymentExceedsOutstanding(ValidationError):
    """Raised when a payment is larger than the document's unpaid balance."""
    pass


class DependentRecordsExist(ValidationError):
    """Raised when payments or linked documents block a cancellation/deletion."""
    pass


class InvalidTransition(ValidationError):
    """Raised when a document is asked to move to a status it cannot reach."""
    pass
