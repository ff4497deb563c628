"""
app/api/notifications.py

Purpose: Notification endpoints
"""

from fastapi import APIRouter, Depends

from app.core.container import get_notification_service
from app.core.dependencies import get_current_user, require_roles
from app.core.errors import handle_result
from app.models.enums import UserRole
from app.schemas.notification import NotificationCreate, NotificationUpdate
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"], dependencies=[Depends(get_current_user)])


@router.get("", dependencies=[Depends(require_roles(UserRole.ADMIN))])
async def list_notifications(service: NotificationService = Depends(get_notification_service)):
    return handle_result(await service.find_all())


@router.post("", status_code=201)
async def create_notification(body: NotificationCreate, service: NotificationService = Depends(get_notification_service)):
    result = await service.create(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.get("/user/{user_id}")
async def list_user_notifications(user_id: str, service: NotificationService = Depends(get_notification_service)):
    return handle_result(await service.find_by_user_id(user_id))


@router.get("/{id}")
async def get_notification(id: str, service: NotificationService = Depends(get_notification_service)):
    return handle_result(await service.find_by_id(id))


@router.patch("/{id}/read")
async def mark_notification_read(id: str, service: NotificationService = Depends(get_notification_service)):
    return handle_result(await service.mark_as_read(id))


@router.put("/{id}")
async def update_notification(
    id: str,
    body: NotificationUpdate,
    service: NotificationService = Depends(get_notification_service),
):
    return handle_result(await service.update(id, body.model_dump(exclude_unset=True)))


@router.delete("/{id}")
async def delete_notification(id: str, service: NotificationService = Depends(get_notification_service)):
    return handle_result(await service.delete(id))
