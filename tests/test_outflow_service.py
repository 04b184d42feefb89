"""Tests for OutflowService against the database directly."""
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from inventory_ledger.exceptions import InsufficientStockError, ProductNotFoundError
from inventory_ledger.models.outflow import OutflowRecord
from inventory_ledger.models.product import Product
from inventory_ledger.services.outflow_service import OutflowService


@pytest.fixture
def product(db_session):
    product = Product(product_code="A1", name="Widget", stock=10, owner_email="owner@x.com")
    db_session.add(product)
    db_session.commit()
    return product


def test_record_outflow_decrements_and_appends(db_session, product):
    """Test stock S becomes S - Q and one record is appended."""
    service = OutflowService(db_session)

    outflow, remaining = service.record_outflow("A1", 4, "owner@x.com")

    assert remaining == 6
    assert outflow.id is not None
    assert outflow.product_name == "Widget"
    assert outflow.quantity == 4
    assert db_session.query(OutflowRecord).count() == 1
    assert db_session.query(Product).filter_by(product_code="A1").one().stock == 6


def test_record_outflow_unknown_code(db_session, product):
    service = OutflowService(db_session)

    with pytest.raises(ProductNotFoundError):
        service.record_outflow("ZZ", 1, "owner@x.com")

    assert db_session.query(OutflowRecord).count() == 0


def test_record_outflow_insufficient(db_session, product):
    service = OutflowService(db_session)

    with pytest.raises(InsufficientStockError):
        service.record_outflow("A1", 11, "owner@x.com")

    assert db_session.query(OutflowRecord).count() == 0
    assert db_session.query(Product).filter_by(product_code="A1").one().stock == 10


def test_conditional_update_rejects_stale_read(db_session, product):
    """Test the decrement is rejected when stock was consumed after the lookup."""
    service = OutflowService(db_session)
    stale = SimpleNamespace(product_code="A1", name="Widget", stock=50)

    with patch.object(OutflowService, "_get_product", return_value=stale):
        with pytest.raises(InsufficientStockError):
            service.record_outflow("A1", 20, "owner@x.com")

    assert db_session.query(OutflowRecord).count() == 0
    assert db_session.query(Product).filter_by(product_code="A1").one().stock == 10


def test_owner_scoped_lookup(db_session, product):
    service = OutflowService(db_session, owner_scoped=True)

    with pytest.raises(ProductNotFoundError):
        service.record_outflow("A1", 1, "intruder@x.com")

    _, remaining = service.record_outflow("A1", 1, "owner@x.com")
    assert remaining == 9
