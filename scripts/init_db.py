"""
Database initialization script - EV Shop collections and indexes

Run once (or after adding indexes) against the configured database:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.db.indexes import INDEX_DEFINITIONS, create_indexes
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_collection

setup_logging()
logger = get_logger("scripts.init_db")


async def verify_indexes():
    """Logs indexes and document counts per collection."""
    logger.info("🔍 Verifying indexes...")

    for collection_name in INDEX_DEFINITIONS:
        collection = get_collection(collection_name)
        indexes = await collection.index_information()
        count = await collection.count_documents({})
        names = [name for name in indexes if name != "_id_"]
        logger.info(f"  {collection_name}: {count} documents, indexes: {', '.join(names) or 'none'}")


async def main():
    """Main initialization"""
    logger.info("=" * 60)
    logger.info(f"  EV Shop Database Setup ({settings.MONGODB_DB_NAME})")
    logger.info("=" * 60)

    await connect_to_mongo()
    try:
        await create_indexes()
        await verify_indexes()
        logger.info("✅ Database initialization complete!")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
