from typing import Any, Dict, List
from pydantic import BaseModel, Field

from helpers.dynamodb_helper import convert_from_dynamodb_type, convert_to_dynamodb_type
from models.course import Course


class ChapterProgress(BaseModel):
    chapterId: str
    completed: bool = False


class SectionProgress(BaseModel):
    sectionId: str
    chapters: List[ChapterProgress] = Field(default_factory=list)


class UserCourseProgress(BaseModel):
    userId: str
    courseId: str
    enrollmentDate: str
    overallProgress: float = 0
    sections: List[SectionProgress] = Field(default_factory=list)
    lastAccessedTimestamp: str

    @classmethod
    def initial_for(cls, user_id: str, course: Course, timestamp: str) -> "UserCourseProgress":
        """
        Fresh progress for a learner who just enrolled.

        Mirrors the course's current section/chapter structure with every
        chapter marked incomplete.
        """
        return cls(
            userId=user_id,
            courseId=course.courseId,
            enrollmentDate=timestamp,
            overallProgress=0,
            sections=[
                SectionProgress(
                    sectionId=section.sectionId,
                    chapters=[
                        ChapterProgress(chapterId=chapter.chapterId, completed=False)
                        for chapter in section.chapters
                    ]
                )
                for section in course.sections
            ],
            lastAccessedTimestamp=timestamp
        )

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "UserCourseProgress":
        return cls(**convert_from_dynamodb_type(item))

    def to_item(self) -> Dict[str, Any]:
        return convert_to_dynamodb_type(self.model_dump())
