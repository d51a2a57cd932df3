from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import Optional
from datetime import datetime, timezone
import json
import logging
import uuid
from pydantic import ValidationError

from helpers import payment_helper, s3_helper
from helpers.course_store import CourseStore, get_course_store
from helpers.errors import CourseNotFoundError, RecordExistsError
from middleware.auth_middleware import get_current_user
from models.course import Course
from schemas.course_schema import CourseCreate, CourseUpdate, CourseResponse, CoursesResponse, UploadUrlResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _server_error(message: str, error: Exception) -> HTTPException:
    logger.error(f"{message}: {str(error)}")
    return HTTPException(status_code=500, detail={"message": message, "error": str(error)})


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail={"message": "Course not found"})


@router.get("", response_model=CoursesResponse)
async def list_courses(category: Optional[str] = None, course_store: CourseStore = Depends(get_course_store)):
    try:
        courses = await run_in_threadpool(course_store.scan, category)
    except Exception as e:
        raise _server_error("Error listing courses", e)
    return {
        "message": "Courses retrieved successfully",
        "data": [course.model_dump() for course in courses]
    }


@router.post("", response_model=CourseResponse, status_code=201)
async def create_course(course: CourseCreate, course_store: CourseStore = Depends(get_course_store)):
    """Create a course and register it with Stripe so it can be purchased"""
    timestamp = datetime.now(timezone.utc).isoformat()
    new_course = Course(
        courseId=course.courseId or str(uuid.uuid4()),
        teacherId=course.teacherId,
        teacherName=course.teacherName,
        title=course.title or "Untitled Course",
        description=course.description or "",
        category=course.category or "Uncategorized",
        image="",
        price=course.price or 0,
        level=course.level or "Beginner",
        status="Draft",
        sections=course.sections or [],
        createdAt=timestamp,
        updatedAt=timestamp
    )

    try:
        await run_in_threadpool(course_store.create, new_course)
        stripe_price = await run_in_threadpool(
            payment_helper.register_course_product, new_course.title, new_course.price
        )
    except RecordExistsError as e:
        raise HTTPException(status_code=409, detail={"message": "Course already exists", "error": str(e)})
    except Exception as e:
        raise _server_error("Error creating course", e)

    logger.info(f"Created course {new_course.courseId} with Stripe price {stripe_price.id}")
    return {
        "message": "Course created successfully",
        "data": {
            "course": new_course.model_dump(),
            "stripePrice": {
                "id": stripe_price.id,
                "product": stripe_price.product,
                "unitAmount": stripe_price.unit_amount,
                "currency": stripe_price.currency
            }
        }
    }


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: str, course_store: CourseStore = Depends(get_course_store)):
    try:
        course = await run_in_threadpool(course_store.get, course_id)
    except Exception as e:
        raise _server_error("Error retrieving course", e)
    if course is None:
        raise _not_found()
    return {"message": "Course retrieved successfully", "data": course.model_dump()}


@router.put("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[int] = Form(None),
    level: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    teacherName: Optional[str] = Form(None),
    sections: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    course_store: CourseStore = Depends(get_course_store)
):
    """
    Update course fields from a multipart form.

    `sections` arrives as a JSON string. When an image file is attached it is
    uploaded to S3 first and its URL replaces the course image.
    """
    try:
        course_update = CourseUpdate(
            title=title,
            description=description,
            category=category,
            price=price,
            level=level,
            status=status,
            teacherName=teacherName,
            sections=json.loads(sections) if sections else None
        )
    except (json.JSONDecodeError, ValidationError) as e:
        raise HTTPException(status_code=400, detail={"message": "Invalid course update", "error": str(e)})

    updates = course_update.model_dump(exclude_none=True)

    try:
        if image is not None and image.filename:
            content = await image.read()
            updates['image'] = await run_in_threadpool(
                s3_helper.upload_course_image,
                course_id,
                image.filename,
                content,
                image.content_type or 'application/octet-stream'
            )
        updates['updatedAt'] = datetime.now(timezone.utc).isoformat()
        course = await run_in_threadpool(course_store.update, course_id, updates)
    except CourseNotFoundError:
        raise _not_found()
    except Exception as e:
        raise _server_error("Error updating course", e)

    return {"message": "Course updated successfully", "data": course.model_dump()}


@router.delete("/{course_id}", status_code=204)
async def delete_course(course_id: str, course_store: CourseStore = Depends(get_course_store)):
    try:
        await run_in_threadpool(course_store.delete, course_id)
    except Exception as e:
        raise _server_error("Error deleting course", e)
    return Response(status_code=204)


@router.post(
    "/{course_id}/sections/{section_id}/chapters/{chapter_id}/get-upload-url",
    response_model=UploadUrlResponse
)
async def get_upload_video_url(
    course_id: str,
    section_id: str,
    chapter_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Presigned S3 URL the client uploads the chapter video to"""
    try:
        upload_url = await run_in_threadpool(
            s3_helper.presign_chapter_video_upload, course_id, section_id, chapter_id
        )
    except Exception as e:
        raise _server_error("Error generating upload URL", e)

    logger.info(f"User {current_user['userId']} requested upload URL for chapter {chapter_id} of course {course_id}")
    return {
        "message": "Upload URL generated successfully",
        "data": {"uploadUrl": upload_url}
    }
