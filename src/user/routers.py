from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_session
from src.core.pagination import (
    PaginatedResponse,
    PaginationParams,
    get_pagination_params,
    parse_optional_bool,
)
from src.user.dependencies import get_user_service
from src.user.schemas import CreateUserModel, UpdateUserModel, UserViewModel
from src.user.services import UserService

router = APIRouter()

NOT_FOUND_RESPONSE = {status.HTTP_404_NOT_FOUND: {"description": "User not found"}}
VALIDATION_RESPONSE = {
    status.HTTP_400_BAD_REQUEST: {"description": "Field-level validation errors"}
}


@router.get("", response_model=PaginatedResponse[UserViewModel], summary="List of users")
async def list_users(
    pagination: Annotated[PaginationParams, Depends(get_pagination_params)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    session: Annotated[AsyncSession, Depends(get_session)],
    disabled: Annotated[
        str | None, Query(description="Filter users by disabled status")
    ] = None,
) -> PaginatedResponse[UserViewModel]:
    return await user_service.list_users(
        session, pagination, disabled=parse_optional_bool(disabled)
    )


@router.post(
    "",
    response_model=UserViewModel,
    status_code=status.HTTP_201_CREATED,
    responses=VALIDATION_RESPONSE,
    summary="Create a new user",
)
async def create_user(
    user_data: CreateUserModel,
    user_service: Annotated[UserService, Depends(get_user_service)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserViewModel:
    user = await user_service.create(session, user_data)
    return UserViewModel.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserViewModel,
    responses=NOT_FOUND_RESPONSE,
    summary="Get user details by ID",
)
async def get_user(
    user_id: int,
    user_service: Annotated[UserService, Depends(get_user_service)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserViewModel:
    user = await user_service.get_single_or_404(session, id=user_id)
    return UserViewModel.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserViewModel,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE},
    summary="Update user details",
)
async def update_user(
    user_id: int,
    user_service: Annotated[UserService, Depends(get_user_service)],
    session: Annotated[AsyncSession, Depends(get_session)],
    user_data: Annotated[UpdateUserModel | None, Body()] = None,
) -> UserViewModel:
    """
    Applies only the fields present in the request body. A request without a
    body is an empty update and returns the record unchanged.
    """
    if user_data is None:
        user_data = UpdateUserModel()
    user = await user_service.update_or_404(session, user_data, id=user_id)
    return UserViewModel.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND_RESPONSE,
    summary="Delete a user",
)
async def delete_user(
    user_id: int,
    user_service: Annotated[UserService, Depends(get_user_service)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    await user_service.delete_or_404(session, id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
