from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
import logging

from helpers.course_store import CourseStore, get_course_store
from helpers.progress_store import ProgressStore, get_progress_store
from middleware.auth_middleware import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_same_user(current_user: dict, user_id: str):
    if current_user.get("userId") != user_id:
        raise HTTPException(status_code=403, detail={"message": "Access denied"})


@router.get("/{user_id}/enrolled-courses")
async def get_user_enrolled_courses(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    course_store: CourseStore = Depends(get_course_store),
    progress_store: ProgressStore = Depends(get_progress_store)
):
    """Courses the user has a progress record for"""
    _require_same_user(current_user, user_id)
    try:
        progress_records = await run_in_threadpool(progress_store.query_by_user, user_id)
        courses = []
        for progress in progress_records:
            course = await run_in_threadpool(course_store.get, progress.courseId)
            # deleted courses leave their progress behind
            if course is not None:
                courses.append(course.model_dump())
    except Exception as e:
        logger.error(f"Error retrieving enrolled courses for {user_id}: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail={"message": "Error retrieving enrolled courses", "error": str(e)}
        )

    return {"message": "Enrolled courses retrieved successfully", "data": courses}


@router.get("/{user_id}/courses/{course_id}")
async def get_user_course_progress(
    user_id: str,
    course_id: str,
    current_user: dict = Depends(get_current_user),
    progress_store: ProgressStore = Depends(get_progress_store)
):
    _require_same_user(current_user, user_id)
    try:
        progress = await run_in_threadpool(progress_store.get, user_id, course_id)
    except Exception as e:
        logger.error(f"Error retrieving progress for {user_id}/{course_id}: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail={"message": "Error retrieving user course progress", "error": str(e)}
        )
    if progress is None:
        raise HTTPException(status_code=404, detail={"message": "Course progress not found for this user"})

    return {"message": "Course progress retrieved successfully", "data": progress.model_dump()}
