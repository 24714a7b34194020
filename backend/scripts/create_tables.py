"""Script to create database tables and seed the default parameters."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from compliance_ai.infrastructure.database.session import create_tables, local_session  # noqa: E402
from compliance_ai.infrastructure.logging import get_logger  # noqa: E402
from compliance_ai.modules.parameter.services import ParameterService  # noqa: E402

logger = get_logger(__name__)


async def main() -> None:
    """Create database tables and any missing default parameters."""
    logger.info("Creating database tables...")

    try:
        await create_tables()
        async with local_session() as db:
            created = await ParameterService().ensure_defaults(db)
        logger.info(f"Database tables created, {created} parameters seeded")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
