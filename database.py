from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from pymongo.errors import ConnectionFailure
from models.specialty import SpecialtyDocument
from models.insurance import InsuranceDocument
from models.doctor import DoctorDocument
from models.patient import PatientDocument
from models.appointment import AppointmentDocument
from repository.base import ClinicRepository
from repository.fallback import FallbackRepository
from repository.mongo import MongoRepository
from repository.snapshot import demo_snapshot
import config
import logging

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [SpecialtyDocument, InsuranceDocument, DoctorDocument, PatientDocument, AppointmentDocument]


async def connect_to_mongo() -> ClinicRepository:
    """Initialise Beanie and return the repository the app should use.

    Startup never fails on a missing or unreachable database: the
    repository then reports PersistenceUnavailableError and, with
    OFFLINE_FALLBACK on, reads are answered from the demo snapshot.
    """
    client = None
    if not config.MONGODB_URI:
        logger.warning("MONGODB_URI is not set, running without a database")
    else:
        client = AsyncIOMotorClient(config.MONGODB_URI, serverSelectionTimeoutMS=config.MONGODB_TIMEOUT_MS)
        try:
            await init_beanie(database=client[config.MONGODB_DB_NAME], document_models=DOCUMENT_MODELS)
            logger.info("Successfully Connected to MongoDB")
        except ConnectionFailure as e:
            logger.error(f"Could not connect to MongoDB: {str(e)}")

    repository = MongoRepository(client)
    if config.OFFLINE_FALLBACK:
        return FallbackRepository(repository, demo_snapshot())
    return repository


def close_mongo(repository: ClinicRepository):
    primary = getattr(repository, "primary", repository)
    client = getattr(primary, "client", None)
    if client is not None:
        client.close()
