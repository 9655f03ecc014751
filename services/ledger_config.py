"""
Ledger Config
=============
The prices and device preferences the ledger needs at computation time, loaded once
and passed explicitly to whoever needs them.

``LedgerConfig.load()`` reads the single ``settings`` row (id=1) and the
``preferences`` key/scalar rows; missing rows fall back to the defaults below.
``save()`` validates and writes both back.  Completed charge sessions copy the fuel
prices from the config at completion time, so later edits never change history.
"""
import logging
from dataclasses import dataclass, fields

from models.settings import SETTINGS_ROW_ID
from models.preferences import Preference
from services.errors import ValidationError

logger = logging.getLogger(__name__)

PRICE_FIELDS = (
    'gasoline_price',
    'diesel_price',
    'home_electricity_price',
    'solar_electricity_price',
)
CONSUMPTION_FIELDS = (
    'gasoline_consumption',
    'diesel_consumption',
)
PREFERENCE_FIELDS = (
    'last_vehicle_id',
    'monthly_budget',
)


@dataclass
class LedgerConfig:
    gasoline_price: float = 1.9  # €/L
    gasoline_consumption: float = 15.0  # km/L
    diesel_price: float = 1.8  # €/L
    diesel_consumption: float = 18.0  # km/L
    home_electricity_price: float = 0.25  # €/kWh
    solar_electricity_price: float = 0.0  # €/kWh
    last_vehicle_id: int = None
    monthly_budget: float = None  # €/month, None = no budget

    @classmethod
    def load(cls, gateway):
        """Build the config from the settings row and preferences."""
        config = cls()
        settings_rows = gateway.select_all('settings', id=SETTINGS_ROW_ID)
        if settings_rows:
            row = settings_rows[0]
            for name in PRICE_FIELDS + CONSUMPTION_FIELDS:
                value = getattr(row, name)
                if value is not None:
                    setattr(config, name, value)

        for pref in gateway.select_all('preferences'):
            if pref.key in PREFERENCE_FIELDS:
                setattr(config, pref.key, pref.typed_value)
        return config

    def update(self, **values):
        """Apply *values* to this config (unknown names are rejected)."""
        known = {f.name for f in fields(self)}
        for name, value in values.items():
            if name not in known:
                raise ValidationError(f'Unknown setting "{name}"')
            setattr(self, name, value)
        return self

    def validate(self):
        errors = {}
        for name in PRICE_FIELDS:
            value = getattr(self, name)
            if value is None or value < 0:
                errors[name] = ['Must be zero or more']
        for name in CONSUMPTION_FIELDS:
            value = getattr(self, name)
            if value is None or value <= 0:
                errors[name] = ['Must be greater than zero']
        if self.monthly_budget is not None and self.monthly_budget < 0:
            errors['monthly_budget'] = ['Must be zero or more']
        if errors:
            raise ValidationError('Invalid settings', errors)

    def save(self, gateway):
        """Validate and persist prices and preferences."""
        self.validate()

        prices = {name: getattr(self, name) for name in PRICE_FIELDS + CONSUMPTION_FIELDS}
        if gateway.select_all('settings', id=SETTINGS_ROW_ID):
            gateway.update('settings', SETTINGS_ROW_ID, prices)
        else:
            gateway.insert('settings', dict(prices, id=SETTINGS_ROW_ID))

        for name in PREFERENCE_FIELDS:
            self._save_preference(gateway, name, getattr(self, name))

        logger.info(f'settings saved: home={self.home_electricity_price} €/kWh, '
                    f'gasoline={self.gasoline_price} €/L, diesel={self.diesel_price} €/L')
        return self

    def select_vehicle(self, vehicle_id, gateway):
        """Remember *vehicle_id* as the last selected vehicle."""
        gateway.get('vehicles', vehicle_id)
        self.last_vehicle_id = vehicle_id
        self._save_preference(gateway, 'last_vehicle_id', vehicle_id)
        return self

    def prices_snapshot(self):
        """The saved_* values written onto a session when it completes."""
        return {
            'saved_gasoline_price': self.gasoline_price,
            'saved_diesel_price': self.diesel_price,
            'saved_gasoline_consumption': self.gasoline_consumption,
            'saved_diesel_consumption': self.diesel_consumption,
        }

    @staticmethod
    def _save_preference(gateway, key, value):
        existing = gateway.select_all('preferences', key=key)
        stored = None if value is None else str(value)
        if existing:
            gateway.update('preferences', existing[0].id, {
                'value': stored,
                'setting_type': Preference.type_of(value),
            })
        elif value is not None:
            gateway.insert('preferences', {
                'key': key,
                'value': stored,
                'setting_type': Preference.type_of(value),
            })

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}
