"""End-to-end tests through the HTTP API."""
from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.models.customer import Client
from backend.app.models.inventory import Product
from backend.app.models.pos import Discount
from backend.app.models.supplier import Supplier

API = "/api/v1"


# ─── Inventory ───────────────────────────────────────────────────────────────


class TestInventoryApi:
    def test_create_and_adjust(self, client: TestClient, products: dict[str, Product]) -> None:
        resp = client.post(
            f"{API}/inventory/products",
            json={"name": "Tira LED RGB 5m", "category": "Electrónica", "unit_price": "12000", "current_stock": 3},
        )
        assert resp.status_code == 201
        product_id = resp.json()["id"]
        assert product_id == "P-0005"

        resp = client.post(
            f"{API}/inventory/products/{product_id}/adjust",
            json={"quantity": 7, "notes": "Ingreso manual"},
            headers={"X-User": "dueño"},
        )
        assert resp.status_code == 200
        assert resp.json()["current_stock"] == 10

    def test_unknown_product_404(self, client: TestClient) -> None:
        assert client.get(f"{API}/inventory/products/P-0404").status_code == 404

    def test_negative_price_rejected(self, client: TestClient) -> None:
        resp = client.post(f"{API}/inventory/products", json={"name": "X", "unit_price": "-1"})
        assert resp.status_code == 422


# ─── POS ─────────────────────────────────────────────────────────────────────


class TestPosApi:
    def test_sale_with_discount(
        self,
        client: TestClient,
        products: dict[str, Product],
        customer: Client,
        discounts: dict[str, Discount],
    ) -> None:
        resp = client.post(
            f"{API}/pos/sale",
            json={
                "items": [{"product_id": "P-0001", "quantity": 1}],
                "client_id": customer.id,
                "payment_method": "Efectivo",
                "discount_id": discounts["Efectivo"].id,
            },
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["id"] == 1001
        assert float(body["total"]) == 40500
        assert body["discount_applied"]["name"] == "Efectivo"
        assert float(body["discount_applied"]["amount"]) == 4500
        assert body["lines"][0]["name"] == "Silla de Roble Clásica"

        resp = client.get(f"{API}/inventory/products/P-0001")
        assert resp.json()["current_stock"] == 11

        history = client.get(f"{API}/sales/", params={"search": "perez"}).json()
        assert [s["id"] for s in history] == [1001]

    def test_empty_cart_422(self, client: TestClient, customer: Client) -> None:
        resp = client.post(f"{API}/pos/sale", json={"items": [], "client_id": customer.id})
        assert resp.status_code == 422

    def test_unknown_payment_method_422(self, client: TestClient, products: dict[str, Product]) -> None:
        resp = client.post(
            f"{API}/pos/sale",
            json={"items": [{"product_id": "P-0001", "quantity": 1}], "client_id": 0, "payment_method": "Bitcoin"},
        )
        assert resp.status_code == 422

    def test_inactive_discount_400(
        self,
        client: TestClient,
        products: dict[str, Product],
        customer: Client,
        discounts: dict[str, Discount],
    ) -> None:
        resp = client.post(
            f"{API}/pos/sale",
            json={
                "items": [{"product_id": "P-0001", "quantity": 1}],
                "client_id": customer.id,
                "discount_id": discounts["Cliente VIP"].id,
            },
        )
        assert resp.status_code == 400

    def test_sale_detail_404(self, client: TestClient) -> None:
        assert client.get(f"{API}/sales/9999").status_code == 404


# ─── Orders ──────────────────────────────────────────────────────────────────


class TestOrdersApi:
    def test_order_lifecycle(
        self, client: TestClient, products: dict[str, Product], customer: Client
    ) -> None:
        catalogue = client.get(f"{API}/orders/services").json()
        assert float(catalogue["Carpintería"]) == 5000

        resp = client.post(
            f"{API}/orders/",
            json={
                "client_id": customer.id,
                "services": ["Carpintería"],
                "items": [{"product_id": "P-0001", "quantity": 1}],
            },
        )
        assert resp.status_code == 201
        order = resp.json()
        assert float(order["total"]) == 50000
        assert order["status"] == "Encargado"
        assert float(order["services"]["Carpintería"]) == 5000

        resp = client.post(
            f"{API}/orders/{order['id']}/payments",
            json={"amount": "20000", "method": "QR"},
        )
        assert float(resp.json()["amount_remaining"]) == 30000

        resp = client.patch(f"{API}/orders/{order['id']}/status", json={"status": "Entregado"})
        assert resp.status_code == 200
        assert resp.json()["conversion_available"] is True

        resp = client.post(f"{API}/orders/{order['id']}/convert", json={"invoice_type": "A"})
        assert resp.json() == {"converted": True, "sale_id": 1001}
        assert client.get(f"{API}/orders/{order['id']}").status_code == 404

        sale = client.get(f"{API}/sales/1001").json()
        assert sale["payment_method"] == "Multiple/Otro"
        assert float(sale["total"]) == 50000

    def test_convert_absent_order(self, client: TestClient) -> None:
        resp = client.post(f"{API}/orders/777/convert", json={})
        assert resp.status_code == 200
        assert resp.json() == {"converted": False, "sale_id": None}

    def test_order_without_service_422(self, client: TestClient, customer: Client) -> None:
        resp = client.post(f"{API}/orders/", json={"client_id": customer.id, "services": []})
        assert resp.status_code == 422

    def test_unknown_client_400(self, client: TestClient) -> None:
        resp = client.post(f"{API}/orders/", json={"client_id": 404, "services": ["Embalaje"]})
        assert resp.status_code == 400


# ─── Purchase orders ─────────────────────────────────────────────────────────


class TestPurchaseOrdersApi:
    def test_receive_once(
        self, client: TestClient, products: dict[str, Product], supplier: Supplier
    ) -> None:
        resp = client.post(
            f"{API}/purchase-orders/",
            json={"supplier_id": supplier.id, "items": [{"product_id": "P-0004", "quantity": 5}]},
        )
        assert resp.status_code == 201
        po = resp.json()
        assert float(po["total"]) == 45000
        assert po["status"] == "Pendiente"

        for _ in range(2):
            resp = client.patch(f"{API}/purchase-orders/{po['id']}/status", json={"status": "Recibida"})
            assert resp.status_code == 200

        assert client.get(f"{API}/inventory/products/P-0004").json()["current_stock"] == 30

    def test_missing_supplier_422(self, client: TestClient, products: dict[str, Product]) -> None:
        resp = client.post(
            f"{API}/purchase-orders/",
            json={"supplier_id": " ", "items": [{"product_id": "P-0004", "quantity": 1}]},
        )
        assert resp.status_code == 422


# ─── Directories, discounts, backup, dashboard ───────────────────────────────


class TestDirectoryApi:
    def test_client_crud(self, client: TestClient) -> None:
        resp = client.post(f"{API}/clients/", json={"first_name": "Carlos", "last_name": "Ruiz"})
        assert resp.status_code == 201
        assert resp.json()["display_name"] == "Ruiz, Carlos"
        client_id = resp.json()["id"]

        resp = client.put(f"{API}/clients/{client_id}", json={"phone": "11-1122-3344"})
        assert resp.json()["phone"] == "11-1122-3344"

        assert client.delete(f"{API}/clients/{client_id}").status_code == 204
        assert client.get(f"{API}/clients/{client_id}").status_code == 404

    def test_supplier_ids(self, client: TestClient) -> None:
        first = client.post(f"{API}/suppliers/", json={"name": "Maderas del Sur"}).json()
        second = client.post(f"{API}/suppliers/", json={"name": "Textiles Unidos"}).json()
        assert [first["id"], second["id"]] == ["PR-0001", "PR-0002"]


class TestDiscountsApi:
    def test_toggle_and_filter(self, client: TestClient, discounts: dict[str, Discount]) -> None:
        vip = discounts["Cliente VIP"].id
        assert client.post(f"{API}/discounts/{vip}/toggle").json()["active"] is True
        active = client.get(f"{API}/discounts/", params={"active_only": True}).json()
        assert len(active) == 3


class TestBackupApi:
    def test_roundtrip_and_invalid_payload(
        self, client: TestClient, db: Session, products: dict[str, Product]
    ) -> None:
        bundle = client.get(f"{API}/backup/export").json()
        assert len(bundle["products"]) == 3

        resp = client.post(f"{API}/backup/import", json={"products": [{"id": "P-1", "name": "X"}]})
        assert resp.status_code == 422
        assert db.query(Product).count() == 3

        resp = client.post(f"{API}/backup/import", json={"products": bundle["products"][:1]})
        assert resp.status_code == 200
        assert resp.json() == {"replaced": {"products": 1}}


class TestDashboardApi:
    def test_dashboard(self, client: TestClient, products: dict[str, Product]) -> None:
        body = client.get(f"{API}/reports/dashboard").json()
        assert [p["id"] for p in body["low_stock"]] == ["P-0002"]
        assert len(body["last_7_days"]) == 7
