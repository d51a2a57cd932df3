from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from helpers.dynamodb_helper import convert_from_dynamodb_type, convert_to_dynamodb_type


class Chapter(BaseModel):
    chapterId: str
    type: str = "Text"  # "Text" | "Quiz" | "Video"
    title: str = ""
    content: str = ""
    video: Optional[str] = None


class Section(BaseModel):
    sectionId: str
    sectionTitle: str = ""
    sectionDescription: Optional[str] = None
    chapters: List[Chapter] = Field(default_factory=list)


class Enrollment(BaseModel):
    userId: str


class Course(BaseModel):
    courseId: str
    teacherId: Optional[str] = None
    teacherName: str
    title: str
    description: Optional[str] = ""
    category: str = "Uncategorized"
    image: Optional[str] = ""
    price: int = 0
    level: str = "Beginner"
    status: str = "Draft"
    sections: List[Section] = Field(default_factory=list)
    enrollments: List[Enrollment] = Field(default_factory=list)
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Course":
        """Build a Course from a raw DynamoDB item.

        Enrollments are stored as a string set of user ids.
        """
        data = convert_from_dynamodb_type(item)
        data['enrollments'] = [{'userId': user_id} for user_id in data.get('enrollments', [])]
        return cls(**data)

    def to_item(self) -> Dict[str, Any]:
        item = self.model_dump(exclude={'enrollments'}, exclude_none=True)
        # DynamoDB rejects empty sets, so the attribute is only written when populated
        if self.enrollments:
            item['enrollments'] = {enrollment.userId for enrollment in self.enrollments}
        return convert_to_dynamodb_type(item)
