from extensions import db
from datetime import datetime


SETTINGS_ROW_ID = 1


class Settings(db.Model):
    """Fuel and energy prices used for cost comparisons (single row, id=1)"""
    __tablename__ = 'settings'

    id = db.Column(db.Integer, primary_key=True)
    gasoline_price = db.Column(db.Float, nullable=False, default=1.9)  # €/L
    gasoline_consumption = db.Column(db.Float, nullable=False, default=15.0)  # km/L
    diesel_price = db.Column(db.Float, nullable=False, default=1.8)  # €/L
    diesel_consumption = db.Column(db.Float, nullable=False, default=18.0)  # km/L
    home_electricity_price = db.Column(db.Float, nullable=False, default=0.25)  # €/kWh
    solar_electricity_price = db.Column(db.Float, nullable=False, default=0.0)  # €/kWh
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<Settings home={self.home_electricity_price} gasoline={self.gasoline_price}>'
