import logging
from botocore.exceptions import ClientError

from config.aws_config import get_s3_bucket_name, get_s3_client, get_s3_region, get_upload_url_expiry
from helpers.errors import StoreError

logger = logging.getLogger(__name__)


def course_image_key(course_id: str, filename: str) -> str:
    return f"courses/{course_id}/{filename}"


def chapter_video_key(course_id: str, section_id: str, chapter_id: str) -> str:
    return f"courses/{course_id}/sections/{section_id}/chapters/{chapter_id}/video.mp4"


def public_object_url(bucket: str, key: str) -> str:
    return f"https://{bucket}.s3.{get_s3_region()}.amazonaws.com/{key}"


def put_object(bucket: str, key: str, body: bytes, content_type: str) -> str:
    """Upload bytes to S3 and return the object's public URL"""
    if not bucket:
        raise StoreError("AWS configuration error: bucket name not set")
    try:
        get_s3_client().put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type
        )
    except ClientError as e:
        logger.error(f"Error uploading {key} to S3: {str(e)}")
        raise StoreError(f"Error uploading {key}: {str(e)}") from e
    logger.info(f"Uploaded {len(body)} bytes to s3://{bucket}/{key}")
    return public_object_url(bucket, key)


def presign_upload(bucket: str, key: str, content_type: str, expiry_seconds: int) -> str:
    """Presigned PUT URL the client uploads to directly"""
    if not bucket:
        raise StoreError("AWS configuration error: bucket name not set")
    try:
        return get_s3_client().generate_presigned_url(
            'put_object',
            Params={
                'Bucket': bucket,
                'Key': key,
                'ContentType': content_type
            },
            ExpiresIn=expiry_seconds
        )
    except ClientError as e:
        logger.error(f"Error presigning upload for {key}: {str(e)}")
        raise StoreError(f"Error generating upload URL: {str(e)}") from e


def upload_course_image(course_id: str, filename: str, body: bytes, content_type: str) -> str:
    return put_object(get_s3_bucket_name(), course_image_key(course_id, filename), body, content_type)


def presign_chapter_video_upload(course_id: str, section_id: str, chapter_id: str) -> str:
    return presign_upload(
        get_s3_bucket_name(),
        chapter_video_key(course_id, section_id, chapter_id),
        'video/mp4',
        get_upload_url_expiry()
    )
