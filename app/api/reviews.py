"""
app/api/reviews.py

Purpose: Review endpoints (reads are public)
"""

from fastapi import APIRouter, Depends

from app.core.container import get_review_service
from app.core.dependencies import get_current_user
from app.core.errors import handle_result
from app.schemas.review import ReviewCreate, ReviewUpdate
from app.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("")
async def list_reviews(service: ReviewService = Depends(get_review_service)):
    return handle_result(await service.get_all())


@router.get("/target/{target_id}")
async def list_target_reviews(target_id: str, service: ReviewService = Depends(get_review_service)):
    return handle_result(await service.get_by_target(target_id))


@router.get("/reviewer/{reviewer_id}")
async def list_reviewer_reviews(reviewer_id: str, service: ReviewService = Depends(get_review_service)):
    return handle_result(await service.get_by_reviewer(reviewer_id))


@router.get("/{id}")
async def get_review(id: str, service: ReviewService = Depends(get_review_service)):
    return handle_result(await service.get_by_id(id))


@router.post("", status_code=201, dependencies=[Depends(get_current_user)])
async def create_review(body: ReviewCreate, service: ReviewService = Depends(get_review_service)):
    result = await service.create(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.put("/{id}", dependencies=[Depends(get_current_user)])
async def update_review(id: str, body: ReviewUpdate, service: ReviewService = Depends(get_review_service)):
    return handle_result(await service.update(id, body.model_dump(exclude_unset=True)))


@router.delete("/{id}", dependencies=[Depends(get_current_user)])
async def delete_review(id: str, service: ReviewService = Depends(get_review_service)):
    return handle_result(await service.delete(id))
