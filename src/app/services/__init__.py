from .unit_of_work import UnitOfWork
from .catalog_service import CatalogService, BuyerInfo

__all__ = [
    "UnitOfWork",
    "CatalogService",
    "BuyerInfo",
]
