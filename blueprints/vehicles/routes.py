from flask import jsonify
from . import vehicles_bp
from .forms import VehicleForm
from services.vehicle_service import VehicleService
from utils.forms import validated_form, supplied_data
from utils.request_helpers import get_gateway, get_config


@vehicles_bp.route('/vehicles', methods=['GET'])
def list_vehicles():
    """All vehicles plus the last selected one"""
    vehicles = VehicleService.list_vehicles(get_gateway())
    return jsonify({
        'vehicles': [v.to_dict() for v in vehicles],
        'last_vehicle_id': get_config().last_vehicle_id,
    })


@vehicles_bp.route('/vehicles', methods=['POST'])
def create_vehicle():
    data = supplied_data(validated_form(VehicleForm))
    vehicle = VehicleService.create_vehicle(
        get_gateway(),
        name=data.get('name'),
        capacity_kwh=data.get('capacity_kwh'),
        brand=data.get('brand'),
        image_url=data.get('image_url'),
    )
    return jsonify(vehicle.to_dict()), 201


@vehicles_bp.route('/vehicles/<int:vehicle_id>', methods=['PUT'])
def update_vehicle(vehicle_id):
    data = supplied_data(validated_form(VehicleForm))
    vehicle = VehicleService.update_vehicle(get_gateway(), vehicle_id, **data)
    return jsonify(vehicle.to_dict())


@vehicles_bp.route('/vehicles/<int:vehicle_id>', methods=['DELETE'])
def delete_vehicle(vehicle_id):
    """Delete a vehicle together with its charge sessions"""
    config = get_config()
    deleted_charges = VehicleService.delete_vehicle(get_gateway(), vehicle_id, config=config)
    return jsonify({
        'deleted': vehicle_id,
        'charges_deleted': deleted_charges,
        'last_vehicle_id': config.last_vehicle_id,
    })


@vehicles_bp.route('/vehicles/<int:vehicle_id>/select', methods=['POST'])
def select_vehicle(vehicle_id):
    config = get_config().select_vehicle(vehicle_id, get_gateway())
    return jsonify({'last_vehicle_id': config.last_vehicle_id})
