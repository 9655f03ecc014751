"""
Settings Forms
"""
from wtforms import FloatField
from wtforms.validators import Optional, NumberRange

from utils.forms import ApiForm


def _price_field(label):
    return FloatField(label, validators=[
        Optional(),
        NumberRange(min=0, message=f'{label} cannot be negative')
    ])


class SettingsForm(ApiForm):
    """Fuel comparison prices, electricity prices and the monthly budget (0 = none)"""
    gasoline_price = _price_field('Gasoline Price (€/L)')
    gasoline_consumption = _price_field('Gasoline Consumption (km/L)')
    diesel_price = _price_field('Diesel Price (€/L)')
    diesel_consumption = _price_field('Diesel Consumption (km/L)')
    home_electricity_price = _price_field('Home Electricity (€/kWh)')
    solar_electricity_price = _price_field('Solar Electricity (€/kWh)')
    monthly_budget = _price_field('Monthly Budget (€)')
