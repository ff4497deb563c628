"""
app/schemas/financial.py

Purpose: Request bodies for /financial

- Institutions, products, applications
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from app.models.enums import ApplicationStatus
from app.schemas.common import EmailStr, ObjectIdStr, RequestModel


class InstitutionCreate(RequestModel):
    user_id: Optional[ObjectIdStr] = None
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, description="e.g. bank, leasing, credit union")
    description: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None


class InstitutionUpdate(RequestModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None


class ProductCreate(RequestModel):
    institution_id: ObjectIdStr
    product_name: str = Field(..., min_length=1)
    product_type: str = Field(..., min_length=1)
    description: Optional[str] = None
    interest_rate_min: Optional[float] = Field(default=None, ge=0)
    interest_rate_max: Optional[float] = Field(default=None, ge=0)
    term_months_min: Optional[int] = Field(default=None, ge=1)
    term_months_max: Optional[int] = Field(default=None, ge=1)
    down_payment_min: Optional[float] = Field(default=None, ge=0)
    eligibility_criteria: Dict[str, Any] = Field(default_factory=dict)
    features: List[str] = Field(default_factory=list)
    is_active: bool = True

    @model_validator(mode="after")
    def ranges_ordered(self):
        if (
            self.interest_rate_min is not None
            and self.interest_rate_max is not None
            and self.interest_rate_min > self.interest_rate_max
        ):
            raise ValueError("interest_rate_min cannot exceed interest_rate_max")
        if (
            self.term_months_min is not None
            and self.term_months_max is not None
            and self.term_months_min > self.term_months_max
        ):
            raise ValueError("term_months_min cannot exceed term_months_max")
        return self


class ProductUpdate(RequestModel):
    product_name: Optional[str] = Field(default=None, min_length=1)
    product_type: Optional[str] = None
    description: Optional[str] = None
    interest_rate_min: Optional[float] = Field(default=None, ge=0)
    interest_rate_max: Optional[float] = Field(default=None, ge=0)
    term_months_min: Optional[int] = Field(default=None, ge=1)
    term_months_max: Optional[int] = Field(default=None, ge=1)
    down_payment_min: Optional[float] = Field(default=None, ge=0)
    eligibility_criteria: Optional[Dict[str, Any]] = None
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ApplicationData(RequestModel):
    full_name: str = Field(..., min_length=1)
    age: int = Field(..., ge=18)
    employment_status: str
    monthly_income: float = Field(..., ge=0)
    requested_amount: float = Field(..., gt=0)
    repayment_period_months: int = Field(..., gt=0)


class ApplicationCreate(RequestModel):
    user_id: ObjectIdStr
    product_id: ObjectIdStr
    message_text: Optional[str] = None
    application_data: ApplicationData


class ApplicationStatusUpdate(RequestModel):
    status: ApplicationStatus
    approval_amount: Optional[float] = Field(default=None, ge=0)
    terms: Optional[str] = None
    rejection_reason: Optional[str] = None
