"""
Charge Session Forms
JSON bodies for the charge session lifecycle (start, stop, manual entry, edit)
"""
from wtforms import StringField, FloatField, IntegerField, BooleanField
from wtforms.validators import Optional, NumberRange

from utils.forms import ApiForm, IsoDateTimeField


def _battery_field(label):
    return FloatField(label, validators=[
        Optional(),
        NumberRange(min=0, max=100, message='Battery must be between %(min)s and %(max)s%%')
    ])


def _non_negative_field(label):
    return FloatField(label, validators=[
        Optional(),
        NumberRange(min=0, message=f'{label} cannot be negative')
    ])


class StartChargeForm(ApiForm):
    """Open a live session"""
    supplier_id = IntegerField('Supplier', validators=[Optional()])
    total_km = _non_negative_field('Odometer')
    battery_start = _battery_field('Battery Start (%)')
    date = IsoDateTimeField('Start', validators=[Optional()])
    notes = StringField('Notes', validators=[Optional()])


class StopChargeForm(ApiForm):
    """Complete the open session"""
    battery_end = _battery_field('Battery End (%)')
    kwh_added = _non_negative_field('Energy')
    cost = _non_negative_field('Cost')
    end_date = IsoDateTimeField('End', validators=[Optional()])
    notes = StringField('Notes', validators=[Optional()])


class ManualChargeForm(ApiForm):
    """Record a completed session in one step"""
    supplier_id = IntegerField('Supplier', validators=[Optional()])
    total_km = _non_negative_field('Odometer')
    kwh_added = _non_negative_field('Energy')
    cost = _non_negative_field('Cost')
    battery_start = _battery_field('Battery Start (%)')
    battery_end = _battery_field('Battery End (%)')
    date = IsoDateTimeField('Date', validators=[Optional()])
    notes = StringField('Notes', validators=[Optional()])


class UpdateChargeForm(ApiForm):
    """
    Edit a completed session.

    ``recalculate_cost`` drops the stored cost and re-applies the supplier's
    pricing rules (a JSON null cost cannot be told apart from a missing one).
    """
    date = IsoDateTimeField('Date', validators=[Optional()])
    total_km = _non_negative_field('Odometer')
    battery_start = _battery_field('Battery Start (%)')
    battery_end = _battery_field('Battery End (%)')
    kwh_added = _non_negative_field('Energy')
    cost = _non_negative_field('Cost')
    supplier_id = IntegerField('Supplier', validators=[Optional()])
    notes = StringField('Notes', validators=[Optional()])
    recalculate_cost = BooleanField('Recalculate Cost')
