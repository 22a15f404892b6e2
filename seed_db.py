"""
Load the sample books, recipes and accounts into the configured database.
Records whose key already exists are left untouched.
"""

import asyncio
import sys

from api.config import config
from api.database import APIDatabaseService
from utilities.logger import get_logger, setup_logging


async def main():
    """Open the configured storage, seed it and report the counts."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )

    logger = get_logger(__name__)
    logger.info("Seeding database", backend=config.storage_backend, database=config.mongodb_database)

    # connect() seeds on its own when SEED_DATA is set
    db_service = APIDatabaseService(config.model_copy(update={"seed_data": False}))
    try:
        await db_service.connect()
        counts = await db_service.seed()
        logger.info("Seeding completed", **counts)

        health = await db_service.health_check()
        logger.info("Collection sizes", **health.get("collections", {}))

    except Exception as e:
        logger.error("Fatal error occurred", error=str(e))
        sys.exit(1)

    finally:
        await db_service.close()


if __name__ == "__main__":
    asyncio.run(main())
