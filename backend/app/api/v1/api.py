from fastapi import APIRouter

from backend.app.api.v1.endpoints import (
    backup,
    clients,
    discounts,
    inventory,
    orders,
    pos,
    purchase_orders,
    reports,
    sales,
    suppliers,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(pos.router, prefix="/pos", tags=["pos"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(discounts.router, prefix="/discounts", tags=["discounts"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["suppliers"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(purchase_orders.router, prefix="/purchase-orders", tags=["purchase-orders"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(backup.router, prefix="/backup", tags=["backup"])
