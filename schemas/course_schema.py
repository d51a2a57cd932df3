from typing import List, Optional
from pydantic import BaseModel

from models.course import Section


class CourseCreate(BaseModel):
    courseId: Optional[str] = None
    teacherId: Optional[str] = None
    teacherName: str
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[int] = None
    level: Optional[str] = None
    sections: Optional[List[Section]] = None


class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    price: Optional[int] = None
    level: Optional[str] = None
    status: Optional[str] = None
    teacherName: Optional[str] = None
    sections: Optional[List[Section]] = None


# Response Models
class CourseResponse(BaseModel):
    message: str
    data: dict


class CoursesResponse(BaseModel):
    message: str
    data: List[dict]


class UploadUrlResponse(BaseModel):
    message: str
    data: dict
