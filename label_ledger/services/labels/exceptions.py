"""Label domain exceptions."""

from label_ledger.services.exceptions import NotFoundError, ValidationError


class UnknownProcessType(NotFoundError):
    """Process type is not known, or has no counter row."""

    def __init__(self, process_type: str):
        self.process_type = process_type
        super().__init__(f"Unknown process type: {process_type}")


class BatchNotFound(NotFoundError):
    """Batch not found."""

    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(f"Batch {batch_id} not found")


class InvalidSupplier(ValidationError):
    """Supplier name is empty after trimming."""

    pass


class QuantityOutOfRange(ValidationError):
    """Quantity is not an integer within 1..max_batch_quantity."""

    pass


class InvalidMode(ValidationError):
    """Mode is not one of the label modes."""

    pass


class InvalidPage(ValidationError):
    """History page or page size out of range."""

    pass


class SequenceExhausted(ValidationError):
    """Allocation would exceed the largest number the code width can render."""

    pass
