from typing import List, Optional
import logging
from botocore.exceptions import ClientError

from config.db_config import PROGRESS_TABLE, get_dynamodb_resource
from helpers.dynamodb_helper import collect_pages, is_conditional_check_failure
from helpers.errors import RecordExistsError, StoreError
from models.user_course_progress import UserCourseProgress

logger = logging.getLogger(__name__)


class ProgressStore:
    """Learner progress in the UserCourseProgress table, keyed by (userId, courseId)"""

    def __init__(self, table):
        self.table = table

    def get(self, user_id: str, course_id: str) -> Optional[UserCourseProgress]:
        try:
            response = self.table.get_item(Key={'userId': user_id, 'courseId': course_id})
        except ClientError as e:
            raise StoreError(f"Error retrieving progress for {user_id}/{course_id}: {str(e)}") from e
        if 'Item' not in response:
            return None
        return UserCourseProgress.from_item(response['Item'])

    def create(self, progress: UserCourseProgress) -> UserCourseProgress:
        logger.debug(f"Creating progress for {progress.userId}/{progress.courseId}")
        try:
            self.table.put_item(
                Item=progress.to_item(),
                ConditionExpression='attribute_not_exists(userId)'
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise RecordExistsError(f"Progress for {progress.userId}/{progress.courseId} already exists") from e
            raise StoreError(f"Error saving progress for {progress.userId}/{progress.courseId}: {str(e)}") from e
        return progress

    def save(self, progress: UserCourseProgress) -> UserCourseProgress:
        try:
            self.table.put_item(Item=progress.to_item())
        except ClientError as e:
            raise StoreError(f"Error saving progress for {progress.userId}/{progress.courseId}: {str(e)}") from e
        return progress

    def query_by_user(self, user_id: str) -> List[UserCourseProgress]:
        try:
            items = collect_pages(
                self.table.query,
                KeyConditionExpression='userId = :userId',
                ExpressionAttributeValues={':userId': user_id}
            )
        except ClientError as e:
            raise StoreError(f"Error retrieving progress for user {user_id}: {str(e)}") from e
        return [UserCourseProgress.from_item(item) for item in items]

    def scan_all(self) -> List[UserCourseProgress]:
        try:
            items = collect_pages(self.table.scan)
        except ClientError as e:
            raise StoreError(f"Error retrieving progress records: {str(e)}") from e
        return [UserCourseProgress.from_item(item) for item in items]


def get_progress_store() -> ProgressStore:
    return ProgressStore(get_dynamodb_resource().Table(PROGRESS_TABLE))
