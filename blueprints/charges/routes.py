from flask import jsonify, request, Response, current_app
from . import charges_bp
from .forms import StartChargeForm, StopChargeForm, ManualChargeForm, UpdateChargeForm
from models.charges import ChargeStatus
from services.charge_service import ChargeSessionService
from services.charge_metrics_service import ChargeMetricsService
from services.export_service import charges_to_csv
from utils.forms import validated_form, supplied_data
from utils.request_helpers import get_gateway, get_config


def _charge_service():
    return ChargeSessionService(get_gateway(), get_config())


@charges_bp.route('/vehicles/<int:vehicle_id>/charges', methods=['GET'])
def list_charges(vehicle_id):
    """Sessions of a vehicle, most recent first, with efficiency badge and average power"""
    gateway = get_gateway()
    gateway.get('vehicles', vehicle_id)
    sessions = gateway.select_all('charges', newest_first=True, vehicle_id=vehicle_id)

    consumptions = [s.consumption for s in sessions if s.status == ChargeStatus.COMPLETED]
    charges = []
    for session in sessions:
        row = session.to_dict()
        row['efficiency_badge'] = ChargeMetricsService.efficiency_badge(session.consumption, consumptions)
        row['average_power_kw'] = ChargeMetricsService.average_power_kw(
            session.kwh_added, session.date, session.end_date
        )
        charges.append(row)
    return jsonify(charges)


@charges_bp.route('/vehicles/<int:vehicle_id>/charges/start', methods=['POST'])
def start_charge(vehicle_id):
    data = supplied_data(validated_form(StartChargeForm))
    session = _charge_service().start(
        vehicle_id,
        supplier_id=data.get('supplier_id'),
        total_km=data.get('total_km'),
        battery_start=data.get('battery_start'),
        date=data.get('date'),
        notes=data.get('notes'),
    )
    return jsonify(session.to_dict()), 201


@charges_bp.route('/vehicles/<int:vehicle_id>/charges/manual', methods=['POST'])
def manual_charge(vehicle_id):
    data = supplied_data(validated_form(ManualChargeForm))
    session = _charge_service().save_manual(
        vehicle_id,
        supplier_id=data.get('supplier_id'),
        total_km=data.get('total_km'),
        kwh_added=data.get('kwh_added'),
        cost=data.get('cost'),
        battery_start=data.get('battery_start'),
        battery_end=data.get('battery_end'),
        date=data.get('date'),
        notes=data.get('notes'),
    )
    return jsonify(session.to_dict()), 201


@charges_bp.route('/vehicles/<int:vehicle_id>/charges/active', methods=['GET'])
def active_charge(vehicle_id):
    get_gateway().get('vehicles', vehicle_id)
    return jsonify(_charge_service().get_state(vehicle_id).to_dict())


@charges_bp.route('/vehicles/<int:vehicle_id>/charges/active', methods=['DELETE'])
def cancel_charge(vehicle_id):
    cancelled_id = _charge_service().cancel(vehicle_id)
    return jsonify({'cancelled': cancelled_id})


@charges_bp.route('/charges/<int:charge_id>/stop', methods=['POST'])
def stop_charge(charge_id):
    data = supplied_data(validated_form(StopChargeForm))
    session = _charge_service().stop(
        charge_id,
        battery_end=data.get('battery_end'),
        kwh_added=data.get('kwh_added'),
        cost=data.get('cost'),
        end_date=data.get('end_date'),
        notes=data.get('notes'),
    )
    return jsonify(session.to_dict())


@charges_bp.route('/charges/<int:charge_id>', methods=['PUT'])
def update_charge(charge_id):
    form = validated_form(UpdateChargeForm)
    changes = supplied_data(form, exclude=('recalculate_cost',))
    if form.recalculate_cost.data and 'cost' not in changes:
        changes['cost'] = None

    session, next_session = _charge_service().update(charge_id, **changes)
    return jsonify({
        'charge': session.to_dict(),
        'next_charge': next_session.to_dict() if next_session else None,
    })


@charges_bp.route('/charges/<int:charge_id>', methods=['DELETE'])
def delete_charge(charge_id):
    _charge_service().delete(charge_id)
    return jsonify({'deleted': charge_id})


@charges_bp.route('/vehicles/<int:vehicle_id>/charges/export.csv', methods=['GET'])
def export_charges(vehicle_id):
    """CSV backup of a vehicle's sessions"""
    gateway = get_gateway()
    vehicle = gateway.get('vehicles', vehicle_id)
    sessions = gateway.select_all('charges', newest_first=True, vehicle_id=vehicle_id)
    current_app.logger.info(f'exporting {len(sessions)} charges of vehicle {vehicle_id} '
                            f'for {request.remote_addr}')

    filename = f'charges_{vehicle.name.replace(" ", "_").lower()}.csv'
    return Response(
        charges_to_csv(sessions),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )
