import enum

from extensions import db
from datetime import datetime


class SupplierKind(enum.Enum):
    """How a supplier's energy is priced.

    HOME is the singleton household supplier ("Casa"): its sessions are priced at
    the home electricity rate from settings and it can never be deleted.
    SOLAR sessions are priced at the solar rate.  EXTERNAL suppliers (public
    networks) carry their own standard cost and the user enters the real cost.
    """
    HOME = 'home'
    EXTERNAL = 'external'
    SOLAR = 'solar'


SUPPLIER_TYPES = ('AC', 'DC')
HOME_SUPPLIER_NAME = 'Casa'


class Supplier(db.Model):
    """Charging supplier (home wallbox, public network, photovoltaic)"""
    __tablename__ = 'suppliers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False, index=True)
    type = db.Column(db.String(2), nullable=False, default='AC')  # AC or DC
    standard_cost = db.Column(db.Float, nullable=False, default=0.0)  # €/kWh
    kind = db.Column(
        db.Enum(SupplierKind, values_callable=lambda kinds: [k.value for k in kinds],
                name='supplier_kind'),
        nullable=False,
        default=SupplierKind.EXTERNAL,
    )
    is_favorite = db.Column(db.Boolean, default=False)
    sort_order = db.Column(db.Integer, default=9)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_home(self):
        return self.kind == SupplierKind.HOME

    def __repr__(self):
        return f'<Supplier {self.name} ({self.type})>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'standard_cost': self.standard_cost,
            'kind': self.kind.value if self.kind else None,
            'is_favorite': bool(self.is_favorite),
            'sort_order': self.sort_order,
        }
