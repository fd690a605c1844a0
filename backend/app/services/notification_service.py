"""Template-based notifications for sales, orders and stock alerts."""

from __future__ import annotations

import logging
from enum import Enum

from backend.app.core.config import settings
from backend.app.services.email_service import EmailService

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    SALE_RECORDED = "SALE_RECORDED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"
    ORDER_CONVERTED = "ORDER_CONVERTED"
    LOW_STOCK_ALERT = "LOW_STOCK_ALERT"


_TEMPLATES: dict[NotificationType, dict[str, str]] = {
    NotificationType.SALE_RECORDED: {
        "subject": "Comprobante de Venta #{sale_id}",
        "body": (
            "<p>Gracias por su compra. Adjuntamos el detalle de su transacción.</p>"
            "<p>Total: <strong>{total}</strong></p>"
            "<p>Atentamente,<br>Sling ERP</p>"
        ),
    },
    NotificationType.ORDER_STATUS_CHANGED: {
        "subject": "Actualización de Pedido #{order_id}",
        "body": (
            "<p>Estimado/a {client},</p>"
            "<p>El estado de su pedido ha sido actualizado a: "
            "<strong>{status}</strong>.</p>"
            "<p>Atentamente,<br>Sling ERP</p>"
        ),
    },
    NotificationType.ORDER_CONVERTED: {
        "subject": "Factura {invoice_type} - Pedido #{order_id}",
        "body": (
            "<p>Estimado/a {client},</p>"
            "<p>Su pedido fue entregado y facturado como venta "
            "<strong>#{sale_id}</strong> por <strong>{total}</strong>.</p>"
            "<p>Atentamente,<br>Sling ERP</p>"
        ),
    },
    NotificationType.LOW_STOCK_ALERT: {
        "subject": "Alerta de Stock: {product_name}",
        "body": (
            "<h2>Alerta de Stock</h2>"
            "<p>El producto <strong>{product_name}</strong> ({product_id}) quedó "
            "con <strong>{quantity}</strong> unidades.</p>"
        ),
    },
}


class NotificationService:
    """Send typed notifications using predefined templates."""

    def __init__(self, email: EmailService | None = None) -> None:
        self._email = email or EmailService()

    def send(
        self,
        notification_type: NotificationType,
        recipient_email: str | None,
        **kwargs: object,
    ) -> bool:
        """Render the template for *notification_type* and send via email."""
        if not recipient_email:
            logger.debug("No recipient for %s, skipped", notification_type.value)
            return False

        template = _TEMPLATES.get(notification_type)
        if template is None:
            logger.error("Unknown notification type: %s", notification_type)
            return False

        subject = template["subject"].format(**kwargs)
        body = template["body"].format(**kwargs)
        return self._email.send(to=recipient_email, subject=subject, body_html=body)

    def low_stock(self, product_id: str, product_name: str, quantity: int) -> bool:
        return self.send(
            NotificationType.LOW_STOCK_ALERT,
            settings.OWNER_EMAIL,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
        )
