# Models package - Import all models for Flask-SQLAlchemy

from models.charges import ChargeSession, ChargeStatus
from models.preferences import Preference
from models.settings import Settings
from models.suppliers import Supplier, SupplierKind
from models.vehicles import Vehicle

__all__ = [
    'ChargeSession',
    'ChargeStatus',
    'Preference',
    'Settings',
    'Supplier',
    'SupplierKind',
    'Vehicle',
]
