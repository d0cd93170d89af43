import motor.motor_asyncio
from beanie import init_beanie
from placement_tracker.core.config import settings

from placement_tracker.models.application import Application
from placement_tracker.models.company_drive import CompanyDrive
from placement_tracker.models.job_role import JobRole
import logging
logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [
    Application,
    CompanyDrive,
    JobRole,
]


async def init_db(database=None):
    """Bind the document models to ``database``, or to the one named in MONGO_URI."""
    if database is None:
        client = motor.motor_asyncio.AsyncIOMotorClient(settings.mongo_uri)
        database = client.get_default_database()
    await init_beanie(
        database=database,
        document_models=DOCUMENT_MODELS,
    )
    logger.info('Connection to MongoDB established and Beanie initialized.')
