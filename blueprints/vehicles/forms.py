"""
Vehicle Forms
JSON bodies for creating and editing vehicles
"""
from wtforms import StringField, FloatField
from wtforms.validators import Optional, Length, NumberRange

from utils.forms import ApiForm


class VehicleForm(ApiForm):
    """Vehicle create/update body; required fields are checked by VehicleService"""
    name = StringField('Name', validators=[
        Optional(),
        Length(max=100, message='Name must be at most 100 characters')
    ])
    brand = StringField('Brand', validators=[
        Optional(),
        Length(max=50, message='Brand must be at most 50 characters')
    ])
    capacity_kwh = FloatField('Battery Capacity (kWh)', validators=[
        Optional(),
        NumberRange(min=0, message='Battery capacity cannot be negative')
    ])
    image_url = StringField('Image URL', validators=[
        Optional(),
        Length(max=500)
    ])
