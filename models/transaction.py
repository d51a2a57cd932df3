from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict

from helpers.dynamodb_helper import convert_from_dynamodb_type, convert_to_dynamodb_type


class Transaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    userId: str
    transactionId: str
    dateTime: str
    courseId: str
    paymentProvider: str  # "stripe"
    amount: Optional[float] = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Transaction":
        return cls(**convert_from_dynamodb_type(item))

    def to_item(self) -> Dict[str, Any]:
        return convert_to_dynamodb_type(self.model_dump(exclude_none=True))
