class CourseNotFoundError(Exception):
    """Raised when a referenced course does not exist"""

    def __init__(self, course_id: str):
        self.course_id = course_id
        super().__init__(f"Course not found: {course_id}")


class StoreError(Exception):
    """A DynamoDB or S3 call failed"""


class RecordExistsError(StoreError):
    """A create was rejected because the key is already taken"""


class PaymentGatewayError(Exception):
    """A Stripe call failed"""


class TransactionConflictError(Exception):
    """A transaction id is already recorded for a different user or course"""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} is already recorded for another purchase")


class TransactionFailedError(Exception):
    """
    One of the purchase writes failed after the course lookup.

    Writes that succeeded before `step` are not rolled back. Re-running the
    purchase with the same transaction id completes the missing steps.
    """

    def __init__(self, transaction_id: str, step: str, cause: Exception):
        self.transaction_id = transaction_id
        self.step = step
        self.cause = cause
        super().__init__(f"Transaction {transaction_id} failed at {step}: {cause}")
