import boto3
import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

COURSES_TABLE = os.getenv('DYNAMODB_COURSES_TABLE', 'Courses')
TRANSACTIONS_TABLE = os.getenv('DYNAMODB_TRANSACTIONS_TABLE', 'Transactions')
TRANSACTIONS_USER_INDEX = 'UserIdIndex'
PROGRESS_TABLE = os.getenv('DYNAMODB_PROGRESS_TABLE', 'UserCourseProgress')

_dynamodb_resource = None


# DynamoDB Configuration
def get_dynamodb_resource():
    """Get DynamoDB resource, pointed at DynamoDB Local when DYNAMODB_ENDPOINT_URL is set"""
    global _dynamodb_resource
    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv('DYNAMODB_ENDPOINT_URL')
    if endpoint_url:
        logger.info(f"Using local DynamoDB endpoint: {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            'dynamodb',
            endpoint_url=endpoint_url,
            region_name=os.getenv('AWS_REGION', 'local'),
            aws_access_key_id=os.getenv('AWS_ACCESS_KEY_ID', 'dummy'),
            aws_secret_access_key=os.getenv('AWS_SECRET_ACCESS_KEY', 'dummy')
        )
    else:
        _dynamodb_resource = boto3.resource('dynamodb', region_name=os.getenv('AWS_REGION'))
    return _dynamodb_resource


def _create_table(dynamodb, table_name, key_schema, attribute_definitions, global_secondary_indexes=None):
    extra_args = {}
    if global_secondary_indexes:
        extra_args['GlobalSecondaryIndexes'] = global_secondary_indexes
    try:
        table = dynamodb.create_table(
            TableName=table_name,
            KeySchema=key_schema,
            AttributeDefinitions=attribute_definitions,
            BillingMode='PAY_PER_REQUEST',
            **extra_args
        )
        logger.info(f"Creating {table_name} table...")
        table.wait_until_exists()
    except dynamodb.meta.client.exceptions.ResourceInUseException:
        logger.info(f"{table_name} table already exists")


def create_tables():
    """Create DynamoDB tables if they don't exist"""
    dynamodb = get_dynamodb_resource()

    _create_table(
        dynamodb,
        COURSES_TABLE,
        key_schema=[{'AttributeName': 'courseId', 'KeyType': 'HASH'}],
        attribute_definitions=[{'AttributeName': 'courseId', 'AttributeType': 'S'}]
    )

    # transactionId is unique across all users; listing by user goes through UserIdIndex
    _create_table(
        dynamodb,
        TRANSACTIONS_TABLE,
        key_schema=[{'AttributeName': 'transactionId', 'KeyType': 'HASH'}],
        attribute_definitions=[
            {'AttributeName': 'transactionId', 'AttributeType': 'S'},
            {'AttributeName': 'userId', 'AttributeType': 'S'}
        ],
        global_secondary_indexes=[
            {
                'IndexName': TRANSACTIONS_USER_INDEX,
                'KeySchema': [
                    {'AttributeName': 'userId', 'KeyType': 'HASH'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ]
    )

    _create_table(
        dynamodb,
        PROGRESS_TABLE,
        key_schema=[
            {'AttributeName': 'userId', 'KeyType': 'HASH'},
            {'AttributeName': 'courseId', 'KeyType': 'RANGE'}
        ],
        attribute_definitions=[
            {'AttributeName': 'userId', 'AttributeType': 'S'},
            {'AttributeName': 'courseId', 'AttributeType': 'S'}
        ]
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
