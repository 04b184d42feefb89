"""Tests for product import and listing endpoints."""
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query, Session
from unittest.mock import patch


def test_import_products(client, import_products):
    """Test importing a product list reports the count."""
    response = import_products([
        {"id_producto": "A1", "nombre": "Widget", "categoria": "tools", "stock": 10},
        {"id_producto": "B2", "nombre": "Gadget", "categoria": "tools", "stock": 4},
    ])

    data = response.json()
    assert data["success"] is True
    assert data["mensaje"] == "Se importaron 2 productos"


def test_reimport_updates_name_and_stock_only(client, import_products):
    """Test re-importing a code replaces name and stock and keeps category and owner."""
    import_products(
        [{"id_producto": "A1", "nombre": "Widget", "categoria": "tools", "stock": 10}],
        owner="owner@x.com",
    )
    import_products(
        [{"id_producto": "A1", "nombre": "Widget v2", "categoria": "toys", "stock": 3}],
        owner="other@x.com",
    )

    data = client.get("/api/todos-productos").json()

    assert data["total"] == 1
    product = data["productos"][0]
    assert product["id_producto"] == "A1"
    assert product["nombre"] == "Widget v2"
    assert product["stock"] == 3
    assert product["categoria"] == "tools"
    assert product["usuario_correo"] == "owner@x.com"


def test_import_missing_owner(client):
    """Test import without usuario_correo is rejected."""
    response = client.post(
        "/api/importar-productos",
        json={"productos": [{"id_producto": "A1", "nombre": "Widget", "stock": 1}]}
    )

    assert response.status_code == 422


def test_import_item_missing_code(client):
    """Test an item without id_producto is rejected."""
    response = client.post(
        "/api/importar-productos",
        json={"productos": [{"nombre": "Widget", "stock": 1}], "usuario_correo": "owner@x.com"}
    )

    assert response.status_code == 422


def test_list_products_filters_by_owner(client, import_products):
    """Test listing returns only the owner's products ordered by code."""
    import_products(
        [
            {"id_producto": "C3", "nombre": "Crate", "stock": 1},
            {"id_producto": "A1", "nombre": "Widget", "stock": 1},
        ],
        owner="owner@x.com",
    )
    import_products([{"id_producto": "B2", "nombre": "Gadget", "stock": 1}], owner="other@x.com")

    response = client.get("/api/productos", params={"usuario_correo": "owner@x.com"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert [p["id_producto"] for p in data["productos"]] == ["A1", "C3"]
    assert all(p["usuario_correo"] == "owner@x.com" for p in data["productos"])


def test_list_products_requires_owner(client):
    """Test listing without usuario_correo is rejected."""
    response = client.get("/api/productos")

    assert response.status_code == 422


def test_list_all_products_newest_import_first(client, import_products):
    """Test the full listing is ordered by import time, newest first."""
    import_products([{"id_producto": "A1", "nombre": "Widget", "stock": 1}])
    import_products([{"id_producto": "B2", "nombre": "Gadget", "stock": 1}], owner="other@x.com")

    data = client.get("/api/todos-productos").json()

    assert data["success"] is True
    assert data["total"] == 2
    assert [p["id_producto"] for p in data["productos"]] == ["B2", "A1"]
    assert "fecha_importacion" in data["productos"][0]


def test_import_failure_keeps_committed_items(client):
    """Test a failure midway returns 500 and keeps the items already imported."""
    original_execute = Session.execute
    calls = {"count": 0}

    def flaky_execute(self, *args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 2:
            raise OperationalError("INSERT", {}, Exception("connection lost"))
        return original_execute(self, *args, **kwargs)

    with patch.object(Session, "execute", flaky_execute):
        response = client.post(
            "/api/importar-productos",
            json={
                "productos": [
                    {"id_producto": "A1", "nombre": "Widget", "stock": 1},
                    {"id_producto": "B2", "nombre": "Gadget", "stock": 1},
                ],
                "usuario_correo": "owner@x.com",
            }
        )

    assert response.status_code == 500
    assert response.json()["error"] == "Error importando productos"

    data = client.get("/api/productos", params={"usuario_correo": "owner@x.com"}).json()
    assert [p["id_producto"] for p in data["productos"]] == ["A1"]


def test_list_products_storage_failure(client, import_products):
    """Test a failed owner listing maps to a generic 500."""
    import_products([{"id_producto": "A1", "nombre": "Widget", "stock": 1}])
    error = OperationalError("SELECT", {}, Exception("connection refused"))

    with patch.object(Query, "all", side_effect=error):
        response = client.get("/api/productos", params={"usuario_correo": "owner@x.com"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Error obteniendo productos"}


def test_list_all_products_storage_failure(client):
    """Test a failed full listing maps to a generic 500."""
    error = OperationalError("SELECT", {}, Exception("connection refused"))

    with patch.object(Query, "all", side_effect=error):
        response = client.get("/api/todos-productos")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Error obteniendo productos"}
