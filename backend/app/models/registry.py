# Importing this module registers every table on Base.metadata
# (used by the Alembic env, the seed script and the test suite).

from backend.app.models.audit import AuditLog
from backend.app.models.customer import Client
from backend.app.models.inventory import Product
from backend.app.models.orders import Order, OrderItem, OrderPayment, OrderService
from backend.app.models.pos import Discount, Sale, SaleLine
from backend.app.models.supplier import PurchaseOrder, PurchaseOrderItem, Supplier
from backend.app.models.user import UserAccount

__all__ = [
    "AuditLog",
    "Client",
    "Discount",
    "Order",
    "OrderItem",
    "OrderPayment",
    "OrderService",
    "Product",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "Sale",
    "SaleLine",
    "Supplier",
    "UserAccount",
]
