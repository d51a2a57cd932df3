from typing import Any, Dict, List
from decimal import Decimal, InvalidOperation
import logging

logger = logging.getLogger(__name__)


def convert_to_dynamodb_type(value: Any) -> Any:
    """
    Convert various data types to DynamoDB-compatible types.
    """
    if isinstance(value, bool):
        return value  # Handle booleans first to prevent conversion to Decimal
    elif isinstance(value, (int, float)):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            logger.error(f"Failed to convert numeric value: {value}")
            raise
    elif isinstance(value, dict):
        return {k: convert_to_dynamodb_type(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [convert_to_dynamodb_type(item) for item in value]
    return value


def convert_from_dynamodb_type(value: Any) -> Any:
    """
    Convert DynamoDB values (Decimal, set) back to plain JSON types.
    """
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    elif isinstance(value, dict):
        return {k: convert_from_dynamodb_type(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [convert_from_dynamodb_type(item) for item in value]
    elif isinstance(value, set):
        return sorted(convert_from_dynamodb_type(item) for item in value)
    return value


def is_conditional_check_failure(error: Exception) -> bool:
    response = getattr(error, 'response', None) or {}
    return response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


def collect_pages(operation, **kwargs) -> List[Dict[str, Any]]:
    """Run a scan or query until DynamoDB stops returning LastEvaluatedKey"""
    items = []
    while True:
        response = operation(**kwargs)
        items.extend(response.get('Items', []))
        last_key = response.get('LastEvaluatedKey')
        if not last_key:
            return items
        kwargs['ExclusiveStartKey'] = last_key
