from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.catalog_service import create_catalog_service
from src.app.services.catalog_service import CatalogService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

catalog_service = create_catalog_service(
    ApplicationConfig.CATALOG_SERVICE_URL,
    timeout=ApplicationConfig.CATALOG_TIMEOUT_SECONDS,
)


async def init_db():
    """Create tables that do not exist yet"""
    import src.domain  # noqa: F401 - registers every table on SQLModel.metadata

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_catalog_service() -> CatalogService:
    return catalog_service
