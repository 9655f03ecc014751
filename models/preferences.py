from extensions import db
from datetime import datetime


class Preference(db.Model):
    """Local device state stored as key/scalar pairs (last selected vehicle, budget)"""
    __tablename__ = 'preferences'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), nullable=False, unique=True)
    value = db.Column(db.String(500))
    setting_type = db.Column(db.String(50))  # 'int', 'float', 'string', 'boolean'
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def typed_value(self):
        """Stored value converted according to setting_type"""
        if self.value is None:
            return None
        if self.setting_type == 'int':
            return int(self.value)
        elif self.setting_type == 'float':
            return float(self.value)
        elif self.setting_type == 'boolean':
            return self.value.lower() in ('true', '1', 'yes')
        else:
            return self.value

    @staticmethod
    def type_of(value):
        if isinstance(value, bool):
            return 'boolean'
        if isinstance(value, int):
            return 'int'
        if isinstance(value, float):
            return 'float'
        return 'string'

    def __repr__(self):
        return f'<Preference {self.key}={self.value}>'
