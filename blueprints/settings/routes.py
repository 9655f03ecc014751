from flask import jsonify
from . import settings_bp
from .forms import SettingsForm
from utils.forms import validated_form, supplied_data
from utils.request_helpers import get_gateway, get_config


@settings_bp.route('/settings', methods=['GET'])
def get_settings():
    return jsonify(get_config().to_dict())


@settings_bp.route('/settings', methods=['PUT'])
def update_settings():
    """Update prices; sessions already completed keep the prices they were saved with"""
    data = supplied_data(validated_form(SettingsForm))
    config = get_config().update(**data).save(get_gateway())
    return jsonify(config.to_dict())
