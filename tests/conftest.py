"""
Shared pytest fixtures for the EV Ledger test suite.

All tests run against an in-memory SQLite database (TestingConfig).
A single app context is pushed for the whole session so that SQLAlchemy
objects remain attached throughout.  After each test, clean_db wipes all
rows so tests are fully independent; fixtures seed what a test needs.
"""
import pytest
from app import create_app
from extensions import db as _db


# ---------------------------------------------------------------------------
# Application / database lifecycle
# ---------------------------------------------------------------------------

@pytest.fixture(scope='session')
def app():
    """Create a test Flask application with an in-memory SQLite database."""
    application = create_app('testing')
    ctx = application.app_context()
    ctx.push()
    _db.create_all()
    yield application
    _db.session.remove()
    _db.drop_all()
    ctx.pop()


@pytest.fixture(autouse=True)
def clean_db(app):
    """Wipe every table after each test so tests never share state."""
    yield
    _db.session.rollback()
    for table in reversed(_db.metadata.sorted_tables):
        _db.session.execute(table.delete())
    _db.session.commit()
    _db.session.expunge_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ---------------------------------------------------------------------------
# Ledger helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def gateway(app):
    from services.table_gateway import TableGateway
    return TableGateway()


@pytest.fixture
def config(gateway):
    """Default prices: home electricity at 0.25 €/kWh."""
    from services.ledger_config import LedgerConfig
    return LedgerConfig().save(gateway)


@pytest.fixture
def vehicle(gateway):
    from services.vehicle_service import VehicleService
    return VehicleService.create_vehicle(gateway, name='Model 3', capacity_kwh=60.0, brand='Tesla')


@pytest.fixture
def home_supplier(gateway):
    from services.supplier_service import SupplierService
    return SupplierService.ensure_home_supplier(gateway)


@pytest.fixture
def external_supplier(gateway):
    from services.supplier_service import SupplierService
    return SupplierService.create_supplier(
        gateway, name='Ionity', supplier_type='DC', standard_cost=0.59
    )
