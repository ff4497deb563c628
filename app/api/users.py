"""
app/api/users.py

Purpose: User management endpoints

- Admin only: list, create, delete, role changes
- Profile read for any signed-in user, profile update for the owner or an admin
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.core.container import get_user_service
from app.core.dependencies import ensure_self_or_admin, get_current_user, require_roles
from app.core.errors import handle_result
from app.models.enums import UserRole
from app.schemas.user import UserCreate, UserRoleUpdate, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

admin_only = require_roles(UserRole.ADMIN)


@router.get("", dependencies=[Depends(admin_only)])
async def list_users(service: UserService = Depends(get_user_service)):
    return handle_result(await service.find_all())


@router.post("", status_code=201, dependencies=[Depends(admin_only)])
async def create_user(body: UserCreate, service: UserService = Depends(get_user_service)):
    result = await service.create(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.get("/{id}", dependencies=[Depends(get_current_user)])
async def get_user(id: str, service: UserService = Depends(get_user_service)):
    return handle_result(await service.find_by_id(id))


@router.put("/{id}")
async def update_user(
    id: str,
    body: UserUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    ensure_self_or_admin(current_user, id)
    return handle_result(await service.update(id, body.model_dump(exclude_unset=True)))


@router.patch("/{id}/role", dependencies=[Depends(admin_only)])
async def update_user_role(id: str, body: UserRoleUpdate, service: UserService = Depends(get_user_service)):
    return handle_result(await service.update(id, body.model_dump()))


@router.delete("/{id}", dependencies=[Depends(admin_only)])
async def delete_user(id: str, service: UserService = Depends(get_user_service)):
    return handle_result(await service.delete(id))
