from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from typing import Optional
import logging

from helpers import enrollment_helper
from helpers.course_store import CourseStore, get_course_store
from helpers.errors import CourseNotFoundError, TransactionConflictError, TransactionFailedError
from helpers.progress_store import ProgressStore, get_progress_store
from helpers.transaction_store import TransactionStore, get_transaction_store
from middleware.auth_middleware import get_current_user
from schemas.transaction_schema import (
    PaymentIntentCreate,
    PaymentIntentResponse,
    PurchaseResponse,
    TransactionCreate,
    TransactionsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_same_user(current_user: dict, user_id: str):
    if current_user.get("userId") != user_id:
        raise HTTPException(status_code=403, detail={"message": "Access denied"})


@router.get("", response_model=TransactionsResponse)
async def list_transactions(
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: dict = Depends(get_current_user),
    transaction_store: TransactionStore = Depends(get_transaction_store)
):
    """List the caller's transactions"""
    user_id = user_id or current_user["userId"]
    _require_same_user(current_user, user_id)
    try:
        transactions = await run_in_threadpool(transaction_store.query_by_user, user_id)
    except Exception as e:
        logger.error(f"Error retrieving transactions: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail={"message": "Error retrieving transactions", "error": str(e)}
        )

    return {
        "message": "Transactions retrieved successfully",
        "data": [transaction.model_dump() for transaction in transactions]
    }


@router.post("/stripe/payment-intent", response_model=PaymentIntentResponse)
async def create_stripe_payment_intent(request: PaymentIntentCreate):
    try:
        data = await enrollment_helper.create_payment_intent(request.amount)
    except Exception as e:
        logger.error(f"Error creating stripe payment intent: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail={"message": "Error creating stripe payment intent", "error": str(e)}
        )

    return {"message": "", "data": data}


@router.post("", response_model=PurchaseResponse)
async def create_transaction(
    request: TransactionCreate,
    current_user: dict = Depends(get_current_user),
    course_store: CourseStore = Depends(get_course_store),
    transaction_store: TransactionStore = Depends(get_transaction_store),
    progress_store: ProgressStore = Depends(get_progress_store)
):
    """Record a confirmed payment and enroll the buyer in the course"""
    _require_same_user(current_user, request.userId)
    try:
        result = await enrollment_helper.purchase_course(
            course_store,
            transaction_store,
            progress_store,
            user_id=request.userId,
            course_id=request.courseId,
            transaction_id=request.transactionId,
            amount=request.amount,
            payment_provider=request.paymentProvider
        )
    except CourseNotFoundError:
        raise HTTPException(status_code=404, detail={"message": "Course not found"})
    except TransactionConflictError as e:
        raise HTTPException(
            status_code=409,
            detail={"message": "Transaction already recorded for another user or course", "error": str(e)}
        )
    except TransactionFailedError as e:
        raise HTTPException(
            status_code=500,
            detail={"message": "Error creating transaction and enrollment", "error": str(e.cause)}
        )
    except Exception as e:
        logger.error(f"Error creating transaction {request.transactionId}: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail={"message": "Error creating transaction and enrollment", "error": str(e)}
        )

    return {
        "message": "Purchased Course successfully",
        "data": result.model_dump()
    }
