from typing import List, Optional
from pydantic import BaseModel


class TransactionCreate(BaseModel):
    userId: str
    courseId: str
    transactionId: str
    amount: Optional[float] = None
    paymentProvider: str = "stripe"


class PaymentIntentCreate(BaseModel):
    amount: Optional[float] = None


# Response Models
class TransactionsResponse(BaseModel):
    message: str
    data: List[dict]


class PurchaseResponse(BaseModel):
    message: str
    data: dict


class PaymentIntentResponse(BaseModel):
    message: str
    data: dict
