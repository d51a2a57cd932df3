import boto3
import os
from dotenv import load_dotenv

load_dotenv()

_s3_client = None


def get_s3_bucket_name() -> str:
    return os.getenv('AWS_S3_BUCKET', '')


def get_s3_region() -> str:
    return os.getenv('AWS_REGION', 'us-east-1')


def get_upload_url_expiry() -> int:
    return int(os.getenv('S3_UPLOAD_URL_EXPIRY', '3600'))


def get_s3_client():
    """Get S3 client"""
    global _s3_client
    if _s3_client is None:
        _s3_client = boto3.client(
            's3',
            aws_access_key_id=os.getenv('AWS_ACCESS_KEY_ID'),
            aws_secret_access_key=os.getenv('AWS_SECRET_ACCESS_KEY'),
            region_name=os.getenv('AWS_REGION')
        )
    return _s3_client
