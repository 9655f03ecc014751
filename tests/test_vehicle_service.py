"""
Tests for VehicleService.
"""
from datetime import datetime

import pytest

from services.charge_service import ChargeSessionService
from services.errors import ConflictError, NotFoundError, ValidationError
from services.ledger_config import LedgerConfig
from services.vehicle_service import VehicleService


class TestCreateVehicle:
    def test_create(self, gateway):
        car = VehicleService.create_vehicle(gateway, name=' Ioniq 5 ', capacity_kwh=72.6, brand='Hyundai')
        assert car.id is not None
        assert car.name == 'Ioniq 5'
        assert car.to_dict()['capacity_kwh'] == pytest.approx(72.6)

    @pytest.mark.parametrize('name, capacity', [('', 50), ('Zoe', 0), ('Zoe', -10), ('Zoe', None)])
    def test_invalid(self, gateway, name, capacity):
        with pytest.raises(ValidationError):
            VehicleService.create_vehicle(gateway, name=name, capacity_kwh=capacity)


class TestUpdateVehicle:
    def test_capacity_editable_before_first_session(self, gateway, vehicle):
        updated = VehicleService.update_vehicle(gateway, vehicle.id, capacity_kwh=75)
        assert updated.capacity_kwh == 75

    def test_capacity_fixed_once_referenced(self, gateway, config, vehicle, home_supplier):
        ChargeSessionService(gateway, config).start(
            vehicle.id, home_supplier.id, total_km=100, battery_start=40, date=datetime(2026, 10, 1)
        )
        with pytest.raises(ConflictError):
            VehicleService.update_vehicle(gateway, vehicle.id, capacity_kwh=75)

        renamed = VehicleService.update_vehicle(gateway, vehicle.id, name='Model 3 LR')
        assert renamed.name == 'Model 3 LR'

    def test_unknown_vehicle(self, gateway):
        with pytest.raises(NotFoundError):
            VehicleService.update_vehicle(gateway, 4242, name='Ghost')


class TestDeleteVehicle:
    def test_deletes_sessions_too(self, gateway, config, vehicle, home_supplier):
        service = ChargeSessionService(gateway, config)
        service.save_manual(vehicle.id, home_supplier.id, total_km=1000, kwh_added=30,
                            date=datetime(2026, 10, 1))
        service.start(vehicle.id, home_supplier.id, total_km=1200, battery_start=20,
                      date=datetime(2026, 10, 3))

        assert VehicleService.delete_vehicle(gateway, vehicle.id) == 2
        assert gateway.select_all('charges') == []
        with pytest.raises(NotFoundError):
            gateway.get('vehicles', vehicle.id)

    def test_selection_moves_to_remaining_vehicle(self, gateway, vehicle):
        other = VehicleService.create_vehicle(gateway, name='Zoe', capacity_kwh=52)
        config = LedgerConfig.load(gateway).select_vehicle(vehicle.id, gateway)

        VehicleService.delete_vehicle(gateway, vehicle.id, config=config)
        assert config.last_vehicle_id == other.id
        assert LedgerConfig.load(gateway).last_vehicle_id == other.id

    def test_selection_cleared_when_last_vehicle_goes(self, gateway, vehicle):
        config = LedgerConfig.load(gateway).select_vehicle(vehicle.id, gateway)
        VehicleService.delete_vehicle(gateway, vehicle.id, config=config)
        assert LedgerConfig.load(gateway).last_vehicle_id is None
