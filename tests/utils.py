"""Test doubles shared across the test modules."""

import copy
import threading

from botocore.exceptions import ClientError


def conditional_check_failed(operation: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "ConditionalCheckFailedException", "Message": "The conditional request failed"}},
        operation,
    )


def service_unavailable(operation: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "ServiceUnavailable", "Message": "DynamoDB is unavailable"}},
        operation,
    )


class FakeTable:
    """In-memory stand-in for a boto3 DynamoDB Table.

    Understands exactly the expressions the store adapters send.
    """

    def __init__(self, key_names):
        self.key_names = key_names
        self.items = {}
        self.calls = []
        self.failures = {}
        self._lock = threading.Lock()

    def fail(self, operation: str, error: Exception):
        self.failures[operation] = error

    def _check_failure(self, operation: str):
        error = self.failures.pop(operation, None)
        if error is not None:
            raise error

    def _key(self, data):
        return tuple(data[name] for name in self.key_names)

    def get_item(self, Key):
        with self._lock:
            self.calls.append("get_item")
            self._check_failure("get_item")
            item = self.items.get(self._key(Key))
            return {"Item": copy.deepcopy(item)} if item is not None else {}

    def put_item(self, Item, ConditionExpression=None):
        with self._lock:
            self.calls.append("put_item")
            self._check_failure("put_item")
            key = self._key(Item)
            if ConditionExpression and ConditionExpression.startswith("attribute_not_exists") and key in self.items:
                raise conditional_check_failed("PutItem")
            self.items[key] = copy.deepcopy(Item)
            return {}

    def update_item(
        self,
        Key,
        UpdateExpression,
        ExpressionAttributeNames,
        ExpressionAttributeValues,
        ConditionExpression=None,
        ReturnValues=None,
    ):
        with self._lock:
            self.calls.append("update_item")
            self._check_failure("update_item")
            key = self._key(Key)
            if ConditionExpression and ConditionExpression.startswith("attribute_exists") and key not in self.items:
                raise conditional_check_failed("UpdateItem")
            item = self.items.setdefault(key, copy.deepcopy(Key))

            action, _, clauses = UpdateExpression.partition(" ")
            for clause in clauses.split(", "):
                if action == "SET":
                    name_ref, _, value_ref = clause.partition(" = ")
                    item[ExpressionAttributeNames[name_ref]] = copy.deepcopy(ExpressionAttributeValues[value_ref])
                elif action == "ADD":
                    name_ref, _, value_ref = clause.partition(" ")
                    name = ExpressionAttributeNames[name_ref]
                    item[name] = set(item.get(name, set())) | set(ExpressionAttributeValues[value_ref])
                else:
                    raise ValueError(f"Unsupported update expression: {UpdateExpression}")

            if ReturnValues == "ALL_NEW":
                return {"Attributes": copy.deepcopy(item)}
            return {}

    def delete_item(self, Key):
        with self._lock:
            self.calls.append("delete_item")
            self._check_failure("delete_item")
            self.items.pop(self._key(Key), None)
            return {}

    def scan(self, **kwargs):
        with self._lock:
            self.calls.append("scan")
            self._check_failure("scan")
            return {"Items": [copy.deepcopy(item) for item in self.items.values()]}

    def query(self, KeyConditionExpression, ExpressionAttributeValues, **kwargs):
        with self._lock:
            self.calls.append("query")
            self._check_failure("query")
            name, _, value_ref = KeyConditionExpression.partition(" = ")
            value = ExpressionAttributeValues[value_ref]
            return {"Items": [copy.deepcopy(item) for item in self.items.values() if item.get(name) == value]}
