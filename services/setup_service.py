"""
First-run setup: create the tables, the home supplier and the settings row.

Safe to run repeatedly; existing rows are left untouched.
"""
import logging

from extensions import db
from models.settings import SETTINGS_ROW_ID
from services.ledger_config import LedgerConfig
from services.supplier_service import SupplierService
from services.table_gateway import TableGateway

logger = logging.getLogger(__name__)


def setup_ledger(gateway=None):
    """Create missing tables and seed the home supplier and default prices."""
    db.create_all()
    gateway = gateway or TableGateway()

    home = SupplierService.ensure_home_supplier(gateway)
    if not gateway.select_all('settings', id=SETTINGS_ROW_ID):
        LedgerConfig().save(gateway)
        logger.info('default settings row created')

    return {
        'tables': [table.name for table in db.metadata.sorted_tables],
        'home_supplier': home.name,
    }
