"""
Supplier Forms
"""
from wtforms import StringField, FloatField, IntegerField, BooleanField
from wtforms.validators import Optional, Length, NumberRange, AnyOf

from models.suppliers import SUPPLIER_TYPES, SupplierKind
from utils.forms import ApiForm


class SupplierForm(ApiForm):
    """Supplier create/update body"""
    name = StringField('Name', validators=[
        Optional(),
        Length(max=100, message='Name must be at most 100 characters')
    ])
    type = StringField('Type', validators=[
        Optional(),
        AnyOf(SUPPLIER_TYPES, message='Type must be AC or DC')
    ])
    standard_cost = FloatField('Standard Cost (€/kWh)', validators=[
        Optional(),
        NumberRange(min=0, message='Standard cost cannot be negative')
    ])
    kind = StringField('Kind', validators=[
        Optional(),
        AnyOf([k.value for k in SupplierKind])
    ])
    is_favorite = BooleanField('Favourite')
    sort_order = IntegerField('Sort Order', validators=[Optional()])
