"""
app/models/enums.py

Purpose: Enumerated field values shared by documents, schemas and services

- Single source of truth for roles and status values
- str-based so values serialize straight into MongoDB and JSON
"""

from enum import Enum


class UserRole(str, Enum):
    """Roles a user can hold. A user may hold several."""
    ADMIN = "admin"
    USER = "user"
    SELLER = "seller"
    FINANCE = "finance"


class NotificationType(str, Enum):
    ORDER_CONFIRMED = "ORDER_CONFIRMED"
    ORDER_CANCELLED = "ORDER_CANCELLED"
    BOOKING_CONFIRMED = "BOOKING_CONFIRMED"
    BOOKING_CANCELLED = "BOOKING_CANCELLED"
    APPLICATION_APPROVED = "APPLICATION_APPROVED"
    APPLICATION_REJECTED = "APPLICATION_REJECTED"
    SELLER_APPLICATION_APPROVED = "SELLER_APPLICATION_APPROVED"
    SELLER_APPLICATION_REJECTED = "SELLER_APPLICATION_REJECTED"


class PaymentMethod(str, Enum):
    VISA = "visa"
    MASTERCARD = "mastercard"
    AMERICAN_EXPRESS = "american_express"


class PaymentType(str, Enum):
    """Purpose of a payment."""
    EV_PURCHASE = "purchase"
    EV_LEASE = "lease"
    EV_TEST_DRIVE = "test_drive"


class PaymentStatus(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    UNDER_REVIEW = "under_review"
    COMPLETED = "completed"


# A user holding an application in one of these states may not submit another
BLOCKING_APPLICATION_STATUSES = (
    ApplicationStatus.PENDING,
    ApplicationStatus.APPROVED,
    ApplicationStatus.UNDER_REVIEW,
)


class ReviewType(str, Enum):
    """Kind of entity a review targets."""
    PRODUCT = "product"
    SERVICE = "service"


class ListingType(str, Enum):
    SALE = "sale"
    LEASE = "lease"


class VehicleCondition(str, Enum):
    NEW = "new"
    USED = "used"


class ListingStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SOLD = "sold"


class TestDriveBookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
