"""
app/db/indexes.py

Purpose: Database index management

- Creates unique and performance indexes
- Ensures fast lookups and data integrity
- Idempotent, safe to run on every startup
"""

from pymongo import ASCENDING, DESCENDING

from app.db import mongo
from app.db.mongo import get_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


# collection -> list of (keys, options)
INDEX_DEFINITIONS = {
    mongo.USERS: [
        ("email", {"unique": True, "name": "email_unique"}),
        ("role", {"name": "role_idx"}),
    ],
    mongo.SELLERS: [
        ("user_id", {"unique": True, "name": "seller_user_unique"}),
        ("rating", {"name": "seller_rating_idx"}),
    ],
    mongo.FINANCIAL_INSTITUTIONS: [
        ("user_id", {"name": "institution_user_idx"}),
        ("name", {"name": "institution_name_idx"}),
        ("type", {"name": "institution_type_idx"}),
    ],
    mongo.FINANCIAL_PRODUCTS: [
        ("institution_id", {"name": "product_institution_idx"}),
        ("product_type", {"name": "product_type_idx"}),
        ("is_active", {"name": "product_active_idx"}),
    ],
    mongo.FINANCING_APPLICATIONS: [
        ("user_id", {"name": "application_user_idx"}),
        ("product_id", {"name": "application_product_idx"}),
        ("status", {"name": "application_status_idx"}),
    ],
    mongo.ORDERS: [
        ("user_id", {"name": "order_user_idx"}),
        ("seller_id", {"name": "order_seller_idx"}),
        ("listing_id", {"name": "order_listing_idx"}),
        ("booking_id", {"name": "order_booking_idx"}),
        ("order_status", {"name": "order_status_idx"}),
        ("payment_status", {"name": "order_payment_status_idx"}),
        ([("order_date", DESCENDING)], {"name": "order_date_idx"}),
    ],
    mongo.PAYMENTS: [
        ("order_id", {"name": "payment_order_idx"}),
        ("payment_method", {"name": "payment_method_idx"}),
        ("payment_type", {"name": "payment_type_idx"}),
        ("status", {"name": "payment_status_idx"}),
    ],
    mongo.REVIEWS: [
        ("reviewer_id", {"name": "review_reviewer_idx"}),
        ("target_id", {"name": "review_target_idx"}),
        ("order_id", {"name": "review_order_idx"}),
        ("rating", {"name": "review_rating_idx"}),
    ],
    mongo.NOTIFICATIONS: [
        ("user_id", {"name": "notification_user_idx"}),
        ("type", {"name": "notification_type_idx"}),
        ("is_read", {"name": "notification_read_idx"}),
    ],
    mongo.CHATBOT_CONVERSATIONS: [
        ([("user_id", ASCENDING), ("created_at", DESCENDING)], {"name": "conversation_user_idx"}),
    ],
    mongo.PREDICTIONS: [
        ("conversation_id", {"name": "prediction_conversation_idx"}),
    ],
    mongo.EV_BRANDS: [
        ("brand_name", {"name": "brand_name_idx"}),
    ],
    mongo.EV_CATEGORIES: [
        ("category_name", {"name": "category_name_idx"}),
    ],
    mongo.EV_MODELS: [
        ("brand_id", {"name": "model_brand_idx"}),
        ("category_id", {"name": "model_category_idx"}),
        ("model_name", {"name": "model_name_idx"}),
        ([("year", DESCENDING)], {"name": "model_year_idx"}),
    ],
    mongo.VEHICLE_LISTINGS: [
        ("seller_id", {"name": "listing_seller_idx"}),
        ("model_id", {"name": "listing_model_idx"}),
        ("price", {"name": "listing_price_idx"}),
        ("status", {"name": "listing_status_idx"}),
    ],
    mongo.TEST_DRIVE_SLOTS: [
        ("seller_id", {"name": "slot_seller_idx"}),
        ("model_id", {"name": "slot_model_idx"}),
        ([("is_active", ASCENDING), ("available_date", ASCENDING)], {"name": "slot_active_date_idx"}),
    ],
    mongo.TEST_DRIVE_BOOKINGS: [
        ([("customer_id", ASCENDING), ("booking_date", DESCENDING)], {"name": "booking_customer_idx"}),
        ("slot_id", {"name": "booking_slot_idx"}),
        ("status", {"name": "booking_status_idx"}),
    ],
}


async def create_indexes():
    """
    Creates all necessary database indexes for optimal performance.
    This function is idempotent - safe to run multiple times.
    """
    try:
        logger.info("Creating database indexes...")

        for collection_name, definitions in INDEX_DEFINITIONS.items():
            collection = get_collection(collection_name)
            for keys, options in definitions:
                await collection.create_index(keys, **options)
                logger.debug(f"Created index {options['name']} on {collection_name}")

        logger.info("✅ All database indexes created successfully")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise

