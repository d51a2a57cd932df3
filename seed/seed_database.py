import os
import sys
import json
from typing import Any, Dict, List

# Dynamically add the parent directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config.db_config import COURSES_TABLE, PROGRESS_TABLE, TRANSACTIONS_TABLE, create_tables, get_dynamodb_resource
from helpers.dynamodb_helper import convert_to_dynamodb_type


def validate_data(data: List[Dict[str, Any]], schema: Dict[str, Any]) -> bool:
    """
    Basic validation for the data structure against a schema.
    """
    for record in data:
        for field, field_schema in schema.items():
            if field not in record:
                if field_schema.get('required', True):
                    print(f"Missing required field '{field}' in record: {record}")
                    return False
            elif not isinstance(record[field], field_schema['type']):
                print(f"Field '{field}' has incorrect type in record: {record}")
                return False
    return True


def load_json_data(file_path: str) -> List[Dict[str, Any]]:
    """
    Load data from a JSON file located in the 'data' directory.
    """
    current_dir = os.path.dirname(os.path.abspath(__file__))
    full_path = os.path.join(current_dir, "data", file_path)

    try:
        with open(full_path, 'r') as file:
            return json.load(file)
    except FileNotFoundError:
        print(f"File not found: {full_path}")
        raise
    except json.JSONDecodeError:
        print(f"Invalid JSON format in file: {full_path}")
        raise


def to_course_item(record: Dict[str, Any]) -> Dict[str, Any]:
    """Seed files list enrollments as [{"userId": ...}]; the table keeps a string set"""
    item = dict(record)
    user_ids = {enrollment['userId'] for enrollment in item.pop('enrollments', [])}
    if user_ids:
        item['enrollments'] = user_ids
    return item


def seed_table(table_name: str, data_file: str, schema: Dict[str, Dict[str, Any]], transform=None):
    """
    Seed data into the specified DynamoDB table.
    """
    dynamodb = get_dynamodb_resource()
    table = dynamodb.Table(table_name)

    data = load_json_data(data_file)

    # Validate the data before seeding
    if not validate_data(data, schema):
        print(f"Data validation failed for file: {data_file}")
        return

    for record in data:
        try:
            if transform is not None:
                record = transform(record)
            table.put_item(Item=convert_to_dynamodb_type(record))
        except Exception as e:
            print(f"Failed to seed record: {record}. Error: {str(e)}")
            raise
    print(f"Successfully seeded data into {table_name}")


def seed_courses():
    print("Seeding courses data...")
    schema = {
        "courseId": {"type": str, "required": True},
        "teacherId": {"type": str, "required": True},
        "teacherName": {"type": str, "required": True},
        "title": {"type": str, "required": True},
        "category": {"type": str, "required": True},
        "price": {"type": int, "required": True},
        "level": {"type": str, "required": True},
        "status": {"type": str, "required": True},
        "enrollments": {"type": list, "required": False},
        "sections": {"type": list, "required": True}
    }
    seed_table(COURSES_TABLE, "courses.json", schema, transform=to_course_item)


def seed_transactions():
    print("Seeding transactions data...")
    schema = {
        "transactionId": {"type": str, "required": True},
        "userId": {"type": str, "required": True},
        "courseId": {"type": str, "required": True},
        "dateTime": {"type": str, "required": True},
        "paymentProvider": {"type": str, "required": True},
        "amount": {"type": (int, float), "required": True}
    }
    seed_table(TRANSACTIONS_TABLE, "transactions.json", schema)


def seed_user_progress():
    print("Seeding user course progress data...")
    schema = {
        "userId": {"type": str, "required": True},
        "courseId": {"type": str, "required": True},
        "enrollmentDate": {"type": str, "required": True},
        "overallProgress": {"type": (int, float), "required": True},
        "sections": {"type": list, "required": True},
        "lastAccessedTimestamp": {"type": str, "required": True}
    }
    seed_table(PROGRESS_TABLE, "userCourseProgress.json", schema)


def seed_all():
    """
    Create the tables and seed all data into the database.
    """
    print("Starting database seeding...")
    try:
        create_tables()
        seed_courses()
        seed_transactions()
        seed_user_progress()
        print("Database seeding completed successfully!")
    except Exception as e:
        print(f"Database seeding failed: {e}")
        raise


if __name__ == "__main__":
    seed_all()
