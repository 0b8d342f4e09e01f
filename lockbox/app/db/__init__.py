import logging

logger = logging.getLogger(__name__)


async def init_models(drop: bool = False):
    """Create every table registered on Base.metadata."""
    from lockbox.app.db.base import Base, engine
    # Models must be imported so their tables are registered
    from lockbox.app import models  # noqa: F401

    try:
        async with engine.begin() as conn:
            if drop:
                await conn.run_sync(Base.metadata.drop_all)
            logger.info("Creating lockbox tables...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Lockbox tables ready.")
    except Exception as e:
        logger.error(f"Table creation failed: {e}")
        raise
