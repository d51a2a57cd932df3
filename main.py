import sys
import os
import logging
from pathlib import Path

# Add the server directory to Python path
server_dir = str(Path(__file__).parent)
if server_dir not in sys.path:
    sys.path.append(server_dir)

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from controllers.course_controller import router as course_router
from controllers.transaction_controller import router as transaction_router
from controllers.user_course_progress_controller import router as user_course_progress_router
from middleware.auth_middleware import get_current_user

# Load environment variables
load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

# Initialize FastAPI app
app = FastAPI()

# Configure CORS
cors_origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Controllers raise with {"message", "error"} bodies; send them unwrapped
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.get("/")
async def health_check():
    return {"message": "Course marketplace API is running"}


app.include_router(course_router, prefix="/courses", tags=["Courses"])
app.include_router(
    transaction_router,
    prefix="/transactions",
    tags=["Transactions"],
    dependencies=[Depends(get_current_user)]
)
app.include_router(user_course_progress_router, prefix="/users/course-progress", tags=["User Course Progress"])
