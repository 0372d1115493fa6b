"""User CRUD endpoints.

Registration is public. Reads need an authenticated ``admin`` or ``user``;
updates and deletions are reserved to admins.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from userauth.adapters.api.v1.responses import OperationResponder
from userauth.core.dependencies.auth import require_roles
from userauth.domain.dtos import CreateUserDTO, GetAllUsersInputDTO, GetUserInputDTO, UpdateUserDTO
from userauth.domain.entities import UserRole
from userauth.domain.use_cases.user import CreateUser, DeleteUser, GetAllUsers, GetUser, UpdateUser
from userauth.infrastructure.dependency_injection.dependencies import (
    get_create_user,
    get_delete_user,
    get_get_all_users,
    get_get_user,
    get_update_user,
)

router = APIRouter(prefix="/user", tags=["users"])

any_member = Depends(require_roles(UserRole.ADMIN, UserRole.USER))
admin_only = Depends(require_roles(UserRole.ADMIN))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a new user")
async def create_user(
    payload: CreateUserDTO,
    create_user_operation: Annotated[CreateUser, Depends(get_create_user)],
):
    responder = OperationResponder()
    (
        create_user_operation.on("SUCCESS", responder.success(status.HTTP_201_CREATED))
        .on("USER_EXISTS", responder.conflict())
        .on("VALIDATION_ERROR", responder.bad_request())
        .on("ERROR", responder.failure())
    )
    await create_user_operation.execute(payload)
    return responder.response


@router.get("", dependencies=[any_member], summary="List users, one page at a time")
async def get_all_users(
    get_all_users_operation: Annotated[GetAllUsers, Depends(get_get_all_users)],
    page: int = 1,
    limit: int = 10,
):
    pagination = GetAllUsersInputDTO.validate_data({"page": page, "limit": limit})

    responder = OperationResponder()
    (
        get_all_users_operation.on("SUCCESS", responder.success())
        .on("ERROR", responder.failure())
    )
    await get_all_users_operation.execute(pagination)
    return responder.response


@router.get("/{user_id}", dependencies=[any_member], summary="Get one user")
async def get_user(
    user_id: str,
    get_user_operation: Annotated[GetUser, Depends(get_get_user)],
):
    responder = OperationResponder()
    (
        get_user_operation.on("SUCCESS", responder.success())
        .on("NOTFOUND_ERROR", responder.not_found())
        .on("ERROR", responder.failure())
    )
    await get_user_operation.execute(GetUserInputDTO.validate_data({"id": user_id}))
    return responder.response


@router.put("/{user_id}", dependencies=[admin_only], summary="Update a user")
async def update_user(
    user_id: str,
    payload: UpdateUserDTO,
    update_user_operation: Annotated[UpdateUser, Depends(get_update_user)],
):
    responder = OperationResponder()
    (
        update_user_operation.on("SUCCESS", responder.success())
        .on("USER_NOT_FOUND", responder.not_found())
        .on("EMAIL_TAKEN", responder.conflict())
        .on("USERNAME_TAKEN", responder.conflict())
        .on("VALIDATION_ERROR", responder.bad_request())
        .on("ERROR", responder.failure())
    )
    await update_user_operation.execute(user_id, payload)
    return responder.response


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[admin_only],
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    delete_user_operation: Annotated[DeleteUser, Depends(get_delete_user)],
):
    responder = OperationResponder()
    (
        delete_user_operation.on("SUCCESS", responder.no_content())
        .on("NOTFOUND_ERROR", responder.not_found())
        .on("VALIDATION_ERROR", responder.bad_request())
        .on("ERROR", responder.failure())
    )
    await delete_user_operation.execute(user_id)
    return responder.response
