from app.economy.adjustments.service import AdjustmentService
from app.economy.store.catalog import StoreCatalog
from app.economy.store.service import StoreService

__all__ = [
    "AdjustmentService",
    "StoreCatalog",
    "StoreService",
]
