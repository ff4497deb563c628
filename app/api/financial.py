"""
app/api/financial.py

Purpose: Financing endpoints

- /financial/institutions
- /financial/products
- /financial/applications
"""

from fastapi import APIRouter, Depends, Query

from app.core.container import get_financial_service
from app.core.dependencies import get_current_user, require_roles
from app.core.errors import handle_result
from app.models.enums import UserRole
from app.schemas.financial import (
    ApplicationCreate,
    ApplicationStatusUpdate,
    InstitutionCreate,
    InstitutionUpdate,
    ProductCreate,
    ProductUpdate,
)
from app.services.financial_service import FinancialService

router = APIRouter(prefix="/financial", tags=["Financial"])

finance_staff = require_roles(UserRole.FINANCE, UserRole.ADMIN)


# Institutions

@router.post("/institutions", status_code=201, dependencies=[Depends(finance_staff)])
async def create_institution(body: InstitutionCreate, service: FinancialService = Depends(get_financial_service)):
    result = await service.create_institution(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.get("/institutions")
async def list_institutions(service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.get_all_institutions())


@router.get("/institutions/{id}")
async def get_institution(id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.get_institution(id))


@router.get("/institutions/{id}/products")
async def list_institution_products(id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.get_products_by_institution(id))


@router.put("/institutions/{id}", dependencies=[Depends(finance_staff)])
async def update_institution(
    id: str,
    body: InstitutionUpdate,
    service: FinancialService = Depends(get_financial_service),
):
    return handle_result(await service.update_institution(id, body.model_dump(exclude_unset=True)))


@router.delete("/institutions/{id}", dependencies=[Depends(finance_staff)])
async def delete_institution(id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.delete_institution(id))


# Products

@router.post("/products", status_code=201, dependencies=[Depends(finance_staff)])
async def create_product(body: ProductCreate, service: FinancialService = Depends(get_financial_service)):
    result = await service.create_product(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.get("/products")
async def list_products(
    active_only: bool = Query(True),
    service: FinancialService = Depends(get_financial_service),
):
    return handle_result(await service.get_all_products(active_only))


@router.get("/products/{id}")
async def get_product(id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.get_product(id))


@router.put("/products/{id}", dependencies=[Depends(finance_staff)])
async def update_product(id: str, body: ProductUpdate, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.update_product(id, body.model_dump(exclude_unset=True)))


@router.delete("/products/{id}", dependencies=[Depends(finance_staff)])
async def delete_product(id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.delete_product(id))


# Applications

@router.post("/applications", status_code=201, dependencies=[Depends(get_current_user)])
async def create_application(body: ApplicationCreate, service: FinancialService = Depends(get_financial_service)):
    result = await service.create_application(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.get("/applications/user/{user_id}", dependencies=[Depends(get_current_user)])
async def list_user_applications(user_id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.get_applications_by_user(user_id))


@router.get("/applications/product/{product_id}", dependencies=[Depends(finance_staff)])
async def list_product_applications(product_id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.get_applications_by_product(product_id))


@router.get("/applications/{id}", dependencies=[Depends(get_current_user)])
async def get_application(id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.get_application(id))


@router.patch("/applications/{id}/status", dependencies=[Depends(finance_staff)])
async def update_application_status(
    id: str,
    body: ApplicationStatusUpdate,
    service: FinancialService = Depends(get_financial_service),
):
    return handle_result(await service.update_application_status(id, body.model_dump(exclude_none=True)))


@router.delete("/applications/{id}", dependencies=[Depends(get_current_user)])
async def delete_application(id: str, service: FinancialService = Depends(get_financial_service)):
    return handle_result(await service.delete_application(id))
