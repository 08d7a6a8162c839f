"""
Users router.

Single-user lookup is addressed by query parameter (``/users/by-id?id=``)
while deletion uses a path parameter; existing clients depend on both shapes.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status

from api.src.dependencies import get_user_repository, parse_id
from api.src.errors import NotFoundError
from api.src.models import ErrorResponse, User, UserCreateRequest
from api.src.repositories.user_repo import UserRepository

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        500: {"model": ErrorResponse, "description": "Internal Server Error"}
    }
)

USER_NOT_FOUND = "User not found"


@router.get(
    "",
    response_model=List[User],
    status_code=status.HTTP_200_OK,
    summary="List users"
)
async def list_users(
    repo: UserRepository = Depends(get_user_repository)
) -> List[User]:
    return await repo.list_users()


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    responses={400: {"model": ErrorResponse, "description": "Invalid request payload"}}
)
async def create_user(
    payload: UserCreateRequest,
    repo: UserRepository = Depends(get_user_repository)
) -> User:
    return await repo.create_user(payload)


@router.get(
    "/by-id",
    response_model=User,
    status_code=status.HTTP_200_OK,
    summary="Get user by ID",
    description="Retrieve a single user by ID using query parameter ?id=",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID"},
        404: {"model": ErrorResponse, "description": USER_NOT_FOUND}
    }
)
async def get_user_by_id(
    id: Optional[str] = Query(default=None, description="User ID"),
    repo: UserRepository = Depends(get_user_repository)
) -> User:
    user_id = parse_id(id)

    user = await repo.get_user_by_id(user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)

    return user


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID"},
        404: {"model": ErrorResponse, "description": USER_NOT_FOUND}
    }
)
async def delete_user(
    id: str,
    repo: UserRepository = Depends(get_user_repository)
) -> Response:
    user_id = parse_id(id)

    if not await repo.delete_user(user_id):
        raise NotFoundError(USER_NOT_FOUND)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
