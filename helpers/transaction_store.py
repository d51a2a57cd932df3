from typing import List, Optional
import logging
from botocore.exceptions import ClientError

from config.db_config import TRANSACTIONS_TABLE, TRANSACTIONS_USER_INDEX, get_dynamodb_resource
from helpers.dynamodb_helper import collect_pages, is_conditional_check_failure
from helpers.errors import RecordExistsError, StoreError
from models.transaction import Transaction

logger = logging.getLogger(__name__)


class TransactionStore:
    """Purchase records in the Transactions table, keyed by transactionId"""

    def __init__(self, table):
        self.table = table

    def get(self, transaction_id: str) -> Optional[Transaction]:
        try:
            response = self.table.get_item(Key={'transactionId': transaction_id})
        except ClientError as e:
            raise StoreError(f"Error retrieving transaction {transaction_id}: {str(e)}") from e
        if 'Item' not in response:
            return None
        return Transaction.from_item(response['Item'])

    def create(self, transaction: Transaction) -> Transaction:
        """Write a new transaction; existing transactions are never overwritten"""
        logger.debug(f"Recording transaction {transaction.transactionId} for user {transaction.userId}")
        try:
            self.table.put_item(
                Item=transaction.to_item(),
                ConditionExpression='attribute_not_exists(transactionId)'
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise RecordExistsError(f"Transaction {transaction.transactionId} already exists") from e
            raise StoreError(f"Error saving transaction {transaction.transactionId}: {str(e)}") from e
        return transaction

    def save(self, transaction: Transaction) -> Transaction:
        try:
            self.table.put_item(Item=transaction.to_item())
        except ClientError as e:
            raise StoreError(f"Error saving transaction {transaction.transactionId}: {str(e)}") from e
        return transaction

    def query_by_user(self, user_id: str) -> List[Transaction]:
        try:
            items = collect_pages(
                self.table.query,
                IndexName=TRANSACTIONS_USER_INDEX,
                KeyConditionExpression='userId = :userId',
                ExpressionAttributeValues={':userId': user_id}
            )
        except ClientError as e:
            raise StoreError(f"Error retrieving transactions for user {user_id}: {str(e)}") from e
        return [Transaction.from_item(item) for item in items]

    def scan_all(self) -> List[Transaction]:
        try:
            items = collect_pages(self.table.scan)
        except ClientError as e:
            raise StoreError(f"Error retrieving transactions: {str(e)}") from e
        return [Transaction.from_item(item) for item in items]


def get_transaction_store() -> TransactionStore:
    return TransactionStore(get_dynamodb_resource().Table(TRANSACTIONS_TABLE))
