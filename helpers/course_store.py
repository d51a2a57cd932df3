from typing import Any, Dict, Iterable, List, Optional
import logging
from botocore.exceptions import ClientError

from config.db_config import COURSES_TABLE, get_dynamodb_resource
from helpers.dynamodb_helper import collect_pages, convert_to_dynamodb_type, is_conditional_check_failure
from helpers.errors import CourseNotFoundError, RecordExistsError, StoreError
from models.course import Course

logger = logging.getLogger(__name__)


class CourseStore:
    """Catalog records in the Courses table, keyed by courseId"""

    def __init__(self, table):
        self.table = table

    def get(self, course_id: str) -> Optional[Course]:
        logger.debug(f"Fetching course {course_id}")
        try:
            response = self.table.get_item(Key={'courseId': course_id})
        except ClientError as e:
            raise StoreError(f"Error retrieving course {course_id}: {str(e)}") from e
        if 'Item' not in response:
            return None
        return Course.from_item(response['Item'])

    def scan(self, category: Optional[str] = None) -> List[Course]:
        try:
            items = collect_pages(self.table.scan)
        except ClientError as e:
            raise StoreError(f"Error listing courses: {str(e)}") from e
        courses = [Course.from_item(item) for item in items]
        if category and category != "all":
            courses = [course for course in courses if course.category == category]
        return courses

    def create(self, course: Course) -> Course:
        logger.debug(f"Creating course {course.courseId}")
        try:
            self.table.put_item(
                Item=course.to_item(),
                ConditionExpression='attribute_not_exists(courseId)'
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise RecordExistsError(f"Course {course.courseId} already exists") from e
            raise StoreError(f"Error creating course {course.courseId}: {str(e)}") from e
        return course

    def update(self, course_id: str, updates: Dict[str, Any]) -> Course:
        """
        Patch the given top-level attributes of an existing course.

        Raises CourseNotFoundError instead of creating a partial record.
        """
        updates = {name: value for name, value in updates.items() if value is not None and name != 'courseId'}
        if not updates:
            course = self.get(course_id)
            if course is None:
                raise CourseNotFoundError(course_id)
            return course

        expression_attribute_names = {}
        expression_attribute_values = {}
        assignments = []
        for attr_name, attr_value in updates.items():
            expression_attribute_names[f'#{attr_name}'] = attr_name
            expression_attribute_values[f':{attr_name}'] = convert_to_dynamodb_type(attr_value)
            assignments.append(f'#{attr_name} = :{attr_name}')

        try:
            response = self.table.update_item(
                Key={'courseId': course_id},
                UpdateExpression='SET ' + ', '.join(assignments),
                ConditionExpression='attribute_exists(courseId)',
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=expression_attribute_values,
                ReturnValues='ALL_NEW'
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise CourseNotFoundError(course_id) from e
            raise StoreError(f"Error updating course {course_id}: {str(e)}") from e
        return Course.from_item(response['Attributes'])

    def add_enrollments(self, course_id: str, user_ids: Iterable[str]) -> None:
        """
        Union user ids into the course's enrollment set.

        Uses DynamoDB ADD on a string set, so concurrent purchases of the
        same course never overwrite each other and repeats are no-ops.
        """
        user_ids = set(user_ids)
        if not user_ids:
            return
        logger.debug(f"Adding enrollments {sorted(user_ids)} to course {course_id}")
        try:
            self.table.update_item(
                Key={'courseId': course_id},
                UpdateExpression='ADD #enrollments :enrollments',
                ConditionExpression='attribute_exists(courseId)',
                ExpressionAttributeNames={'#enrollments': 'enrollments'},
                ExpressionAttributeValues={':enrollments': user_ids}
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise CourseNotFoundError(course_id) from e
            raise StoreError(f"Error adding enrollments to course {course_id}: {str(e)}") from e

    def delete(self, course_id: str) -> None:
        logger.debug(f"Deleting course {course_id}")
        try:
            self.table.delete_item(Key={'courseId': course_id})
        except ClientError as e:
            raise StoreError(f"Error deleting course {course_id}: {str(e)}") from e


def get_course_store() -> CourseStore:
    return CourseStore(get_dynamodb_resource().Table(COURSES_TABLE))
