from flask import jsonify
from . import dashboard_bp
from services.charge_service import ChargeSessionService
from services.charge_metrics_service import ChargeMetricsService
from utils.request_helpers import get_gateway, get_config


@dashboard_bp.route('/vehicles/<int:vehicle_id>/dashboard', methods=['GET'])
def vehicle_dashboard(vehicle_id):
    """Statistics, trend analysis, forecast and budget for one vehicle"""
    gateway = get_gateway()
    config = get_config()
    vehicle = gateway.get('vehicles', vehicle_id)

    service = ChargeSessionService(gateway, config)
    completed = service.completed_sessions(vehicle_id)
    spent = ChargeMetricsService.monthly_spend(completed)

    return jsonify({
        'vehicle': vehicle.to_dict(),
        'state': service.get_state(vehicle_id).to_dict(),
        'stats': ChargeMetricsService.calculate_stats(completed, config),
        'analysis': ChargeMetricsService.calculate_advanced_analysis(completed),
        'forecast': ChargeMetricsService.calculate_forecast(completed),
        'budget': ChargeMetricsService.budget_status(spent, config.monthly_budget),
    })
