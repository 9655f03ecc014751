"""
Request helpers for the JSON API.

Flask-WTF forms read JSON bodies natively, but JSON nulls and non-string scalars
do not survive the fields' coercion.  ``json_formdata`` drops null and blank
members (those fields count as not supplied) and turns the rest into the
strings an HTML form would have posted::

    form = StartChargeForm(formdata=json_formdata())
    if not form.validate():
        raise ValidationError('Invalid charge data', form.errors)
"""
from flask import g, request
from werkzeug.datastructures import ImmutableMultiDict


def _as_form_value(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def json_formdata():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        payload = {}
    return ImmutableMultiDict({
        key: _as_form_value(value) for key, value in payload.items()
        if value is not None and value != ''
    })


def get_gateway():
    """The request's ``TableGateway``."""
    from services.table_gateway import TableGateway
    if 'gateway' not in g:
        g.gateway = TableGateway()
    return g.gateway


def get_config():
    """The ``LedgerConfig`` loaded once per request."""
    from services.ledger_config import LedgerConfig
    if 'ledger_config' not in g:
        g.ledger_config = LedgerConfig.load(get_gateway())
    return g.ledger_config
