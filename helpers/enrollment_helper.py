from typing import Any, Dict, Optional
from datetime import datetime, timezone
import logging
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from config.stripe_config import MINIMUM_CHARGE_AMOUNT, get_stripe_currency
from helpers import payment_helper
from helpers.course_store import CourseStore
from helpers.errors import CourseNotFoundError, RecordExistsError, TransactionConflictError, TransactionFailedError
from helpers.progress_store import ProgressStore
from helpers.transaction_store import TransactionStore
from models.course import Course
from models.transaction import Transaction
from models.user_course_progress import UserCourseProgress

logger = logging.getLogger(__name__)

# Card-style confirmation in the browser only, no redirect-based methods
PAYMENT_METHOD_CONFIG = {
    "enabled": True,
    "allow_redirects": "never",
}


class PurchaseResult(BaseModel):
    transaction: Transaction
    courseProgress: UserCourseProgress


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_payment_amount(amount: Optional[Any]) -> int:
    """Missing, zero, negative and sub-unit amounts fall back to the minimum charge"""
    amount = int(amount) if amount else 0
    if amount <= 0:
        return MINIMUM_CHARGE_AMOUNT
    return amount


async def create_payment_intent(amount: Optional[Any]) -> Dict[str, str]:
    amount = normalize_payment_amount(amount)
    payment_intent = await run_in_threadpool(
        payment_helper.create_payment_intent,
        amount,
        get_stripe_currency(),
        PAYMENT_METHOD_CONFIG
    )
    logger.info(f"Created payment intent for amount {amount}")
    return {"clientSecret": payment_intent.client_secret}


async def _record_transaction(
    transaction_store: TransactionStore,
    user_id: str,
    course_id: str,
    transaction_id: str,
    amount: Optional[float],
    payment_provider: str
) -> Transaction:
    existing = await run_in_threadpool(transaction_store.get, transaction_id)
    if existing is None:
        transaction = Transaction(
            dateTime=_now(),
            userId=user_id,
            courseId=course_id,
            transactionId=transaction_id,
            amount=amount,
            paymentProvider=payment_provider
        )
        try:
            return await run_in_threadpool(transaction_store.create, transaction)
        except RecordExistsError:
            # A concurrent retry recorded it first
            existing = await run_in_threadpool(transaction_store.get, transaction_id)
            if existing is None:
                raise

    if existing.userId != user_id or existing.courseId != course_id:
        raise TransactionConflictError(transaction_id)
    logger.info(f"Transaction {transaction_id} already recorded, resuming enrollment")
    return existing


async def _initialize_progress(progress_store: ProgressStore, user_id: str, course: Course) -> UserCourseProgress:
    existing = await run_in_threadpool(progress_store.get, user_id, course.courseId)
    if existing is not None:
        logger.info(f"Progress for {user_id}/{course.courseId} already exists, keeping it")
        return existing

    progress = UserCourseProgress.initial_for(user_id, course, _now())
    try:
        return await run_in_threadpool(progress_store.create, progress)
    except RecordExistsError:
        existing = await run_in_threadpool(progress_store.get, user_id, course.courseId)
        if existing is None:
            raise
        return existing


async def purchase_course(
    course_store: CourseStore,
    transaction_store: TransactionStore,
    progress_store: ProgressStore,
    user_id: str,
    course_id: str,
    transaction_id: str,
    amount: Optional[float],
    payment_provider: str
) -> PurchaseResult:
    """
    Record a paid purchase and enroll the buyer.

    Runs after the client has confirmed payment with Stripe. The transaction
    is written first since it is the proof of purchase; the progress record
    and the course enrollment follow. There is no rollback: if a later step
    fails the transaction stays recorded and the caller gets a
    TransactionFailedError. Calling again with the same transaction id reuses
    what was already written and finishes the remaining steps.

    Raises:
        CourseNotFoundError: the course does not exist; nothing was written.
        TransactionConflictError: the transaction id is already recorded for
            another user or course. Nothing was written; retrying will not help.
        TransactionFailedError: a write failed part way through.
    """
    course = await run_in_threadpool(course_store.get, course_id)
    if course is None:
        logger.warning(f"Purchase {transaction_id} rejected: course {course_id} not found")
        raise CourseNotFoundError(course_id)

    step = "transaction"
    try:
        transaction = await _record_transaction(
            transaction_store, user_id, course_id, transaction_id, amount, payment_provider
        )
        logger.info(f"Recorded transaction {transaction_id} for user {user_id} on course {course_id}")

        step = "progress"
        course_progress = await _initialize_progress(progress_store, user_id, course)

        step = "enrollment"
        await run_in_threadpool(course_store.add_enrollments, course_id, [user_id])
        logger.info(f"Enrolled user {user_id} in course {course_id}")
    except TransactionConflictError:
        raise
    except Exception as e:
        logger.error(f"Purchase {transaction_id} failed at {step} step: {str(e)}")
        raise TransactionFailedError(transaction_id, step, e) from e

    return PurchaseResult(transaction=transaction, courseProgress=course_progress)
