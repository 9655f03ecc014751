"""
Form helpers shared by the API blueprints.

Bodies are JSON; every API form disables CSRF (there is no browser session) and
only validates types and ranges.  Which fields are required is decided by the
services, which raise ``ValidationError`` themselves.
"""
from dateutil.parser import isoparse
from flask_wtf import FlaskForm
from wtforms import Field
from wtforms.widgets import TextInput

from services.errors import ValidationError
from utils.dates import to_naive_utc
from utils.request_helpers import json_formdata


class ApiForm(FlaskForm):
    class Meta:
        csrf = False


class IsoDateTimeField(Field):
    """ISO-8601 date/time; aware values are converted to naive UTC."""
    widget = TextInput()

    def _value(self):
        return self.data.isoformat() if self.data else ''

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        try:
            self.data = to_naive_utc(isoparse(str(valuelist[0])))
        except (ValueError, OverflowError):
            self.data = None
            raise ValueError(self.gettext('Not a valid ISO 8601 date/time.'))


def validated_form(form_class):
    """Bind *form_class* to the JSON body and validate it."""
    form = form_class(formdata=json_formdata())
    if not form.validate():
        raise ValidationError('Invalid request data', form.errors)
    return form


def supplied_data(form, exclude=()):
    """Data of the fields actually present in the request body."""
    return {
        field.name: field.data
        for field in form
        if field.raw_data and field.name not in exclude
    }
