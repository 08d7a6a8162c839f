"""
Students router.

Provides REST API endpoints for:
- Listing students
- Creating a student
- Reading, replacing and deleting a student by path id

Ids are validated before the repository is touched; a malformed id never
reaches the database.
"""

from typing import List
from fastapi import APIRouter, Depends, Request, Response, status

from api.src.dependencies import get_metrics, get_student_repository, parse_body, parse_id
from api.src.errors import NotFoundError
from api.src.models import ErrorResponse, Student, StudentCreateRequest, StudentUpdateRequest
from api.src.repositories.student_repo import StudentRepository
from shared.metrics import HTTPMetrics

router = APIRouter(
    prefix="/students",
    tags=["Students"],
    responses={
        500: {"model": ErrorResponse, "description": "Internal Server Error"}
    }
)

STUDENT_NOT_FOUND = "Student not found"


@router.get(
    "",
    response_model=List[Student],
    status_code=status.HTTP_200_OK,
    summary="List students"
)
async def list_students(
    repo: StudentRepository = Depends(get_student_repository)
) -> List[Student]:
    """Return all students, or an empty list when there are none."""
    return await repo.list_students()


@router.post(
    "",
    response_model=Student,
    status_code=status.HTTP_201_CREATED,
    summary="Create a student",
    responses={400: {"model": ErrorResponse, "description": "Invalid request payload"}}
)
async def create_student(
    payload: StudentCreateRequest,
    repo: StudentRepository = Depends(get_student_repository),
    metrics: HTTPMetrics = Depends(get_metrics)
) -> Student:
    """
    Create a new student.

    Returns the submitted fields together with the id assigned by the store.
    """
    student = await repo.create_student(payload)
    metrics.student_creations.inc()
    return student


@router.get(
    "/{id}",
    response_model=Student,
    status_code=status.HTTP_200_OK,
    summary="Get a student by ID",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID"},
        404: {"model": ErrorResponse, "description": STUDENT_NOT_FOUND}
    }
)
async def get_student(
    id: str,
    repo: StudentRepository = Depends(get_student_repository)
) -> Student:
    """Retrieve a student by its ID."""
    student_id = parse_id(id)

    student = await repo.get_student(student_id)
    if student is None:
        raise NotFoundError(STUDENT_NOT_FOUND)

    return student


@router.put(
    "/{id}",
    response_model=Student,
    status_code=status.HTTP_200_OK,
    summary="Update a student",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID or payload"},
        404: {"model": ErrorResponse, "description": STUDENT_NOT_FOUND}
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": StudentUpdateRequest.model_json_schema()}
            }
        }
    }
)
async def update_student(
    id: str,
    request: Request,
    repo: StudentRepository = Depends(get_student_repository)
) -> Student:
    """
    Replace name, age and email of an existing student.

    The response is the row as stored after the update, not an echo of the
    request.

    The id is validated before the body, so a request with both wrong is
    answered with "Invalid ID".
    """
    student_id = parse_id(id)
    payload = await parse_body(request, StudentUpdateRequest)

    updated = await repo.update_student(student_id, payload)
    if updated is None:
        raise NotFoundError(STUDENT_NOT_FOUND)

    return updated


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a student",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID"},
        404: {"model": ErrorResponse, "description": STUDENT_NOT_FOUND}
    }
)
async def delete_student(
    id: str,
    repo: StudentRepository = Depends(get_student_repository)
) -> Response:
    """Delete a student by ID."""
    student_id = parse_id(id)

    if not await repo.delete_student(student_id):
        raise NotFoundError(STUDENT_NOT_FOUND)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
