from .unit_of_work import SqlAlchemyUnitOfWork
from .catalog_service import (
    LoggingCatalogService,
    HttpCatalogService,
    create_catalog_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingCatalogService",
    "HttpCatalogService",
    "create_catalog_service",
]
