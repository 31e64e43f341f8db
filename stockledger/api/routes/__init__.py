"""API route modules."""

from stockledger.api.routes.audits import router as audits_router
from stockledger.api.routes.branches import router as branches_router
from stockledger.api.routes.catalog import router as catalog_router
from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.inventory import router as inventory_router
from stockledger.api.routes.movements import router as movements_router
from stockledger.api.routes.purchases import router as purchases_router
from stockledger.api.routes.reports import router as reports_router
from stockledger.api.routes.transformations import router as transformations_router
from stockledger.api.routes.waste import router as waste_router

__all__ = [
    "health_router",
    "branches_router",
    "catalog_router",
    "inventory_router",
    "movements_router",
    "purchases_router",
    "transformations_router",
    "waste_router",
    "audits_router",
    "reports_router",
]
