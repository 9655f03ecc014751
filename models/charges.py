import enum

from extensions import db
from datetime import datetime


class ChargeStatus(enum.Enum):
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'


class ChargeSession(db.Model):
    """
    One charging event for a vehicle.

    Live sessions are inserted as IN_PROGRESS by a start action and completed by a
    stop action; manual sessions are inserted directly as COMPLETED.  The derived
    fields (km_since_last, consumption, cost_difference) and the saved_* fuel
    snapshot are written once, when the session completes.
    """
    __tablename__ = 'charges'
    __table_args__ = (
        # At most one open session per vehicle
        db.Index(
            'uq_charges_open_session_per_vehicle', 'vehicle_id',
            unique=True,
            sqlite_where=db.text("status = 'in_progress'"),
            postgresql_where=db.text("status = 'in_progress'"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    vehicle_id = db.Column(db.Integer, db.ForeignKey('vehicles.id'), nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=True)
    supplier_name = db.Column(db.String(100))  # Snapshot at start
    supplier_type = db.Column(db.String(2))
    date = db.Column(db.DateTime, nullable=False, index=True)  # Start of the session
    end_date = db.Column(db.DateTime)
    total_km = db.Column(db.Float, nullable=False)  # Odometer reading at start
    battery_start = db.Column(db.Float)  # %
    battery_end = db.Column(db.Float)  # %
    kwh_added = db.Column(db.Float)
    cost = db.Column(db.Float)  # €
    standard_cost = db.Column(db.Float)  # Supplier €/kWh at the time of the session
    cost_difference = db.Column(db.Float)  # cost - kwh_added * standard_cost
    km_since_last = db.Column(db.Float)
    consumption = db.Column(db.Float)  # kWh/100km
    status = db.Column(
        db.Enum(ChargeStatus, values_callable=lambda statuses: [s.value for s in statuses],
                name='charge_status', native_enum=False),
        nullable=False,
        default=ChargeStatus.IN_PROGRESS,
    )
    # Fuel comparison snapshot taken at completion
    saved_gasoline_price = db.Column(db.Float)
    saved_diesel_price = db.Column(db.Float)
    saved_gasoline_consumption = db.Column(db.Float)
    saved_diesel_consumption = db.Column(db.Float)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_open(self):
        return self.status == ChargeStatus.IN_PROGRESS

    def __repr__(self):
        return f'<ChargeSession {self.id}: vehicle {self.vehicle_id} @ {self.total_km} km ({self.status})>'

    def to_dict(self):
        return {
            'id': self.id,
            'vehicle_id': self.vehicle_id,
            'supplier_id': self.supplier_id,
            'supplier_name': self.supplier_name,
            'supplier_type': self.supplier_type,
            'date': self.date.isoformat() if self.date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'total_km': self.total_km,
            'battery_start': self.battery_start,
            'battery_end': self.battery_end,
            'kwh_added': self.kwh_added,
            'cost': self.cost,
            'standard_cost': self.standard_cost,
            'cost_difference': self.cost_difference,
            'km_since_last': self.km_since_last,
            'consumption': self.consumption,
            'status': self.status.value if self.status else None,
            'saved_gasoline_price': self.saved_gasoline_price,
            'saved_diesel_price': self.saved_diesel_price,
            'saved_gasoline_consumption': self.saved_gasoline_consumption,
            'saved_diesel_consumption': self.saved_diesel_consumption,
            'notes': self.notes,
        }
