from extensions import db
from datetime import datetime, timezone


class Vehicle(db.Model):
    __tablename__ = 'vehicles'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)  # Model 3, Kona
    brand = db.Column(db.String(50))
    capacity_kwh = db.Column(db.Float, nullable=False)  # Usable battery capacity
    image_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    # Relationships
    charges = db.relationship('ChargeSession', backref='vehicle', lazy=True)

    def __repr__(self):
        return f'<Vehicle {self.id}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'brand': self.brand,
            'capacity_kwh': self.capacity_kwh,
            'image_url': self.image_url,
        }
