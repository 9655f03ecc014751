"""
Tests for TableGateway: table-by-name CRUD and how storage failures surface.
"""
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from models.charges import ChargeStatus
from services.errors import ConflictError, MissingTablesError, NotFoundError, RemoteError
from services.setup_service import setup_ledger


class TestCrud:
    def test_insert_returns_row_with_id(self, gateway):
        row = gateway.insert('vehicles', {'name': 'e-208', 'capacity_kwh': 46})
        assert row.id is not None
        assert gateway.get('vehicles', row.id).name == 'e-208'

    def test_update_and_delete(self, gateway):
        row = gateway.insert('suppliers', {'name': 'Be Charge', 'type': 'AC', 'standard_cost': 0.49})
        gateway.update('suppliers', row.id, {'standard_cost': 0.55})
        assert gateway.get('suppliers', row.id).standard_cost == pytest.approx(0.55)

        gateway.delete('suppliers', row.id)
        with pytest.raises(NotFoundError):
            gateway.get('suppliers', row.id)

    def test_newest_first(self, gateway, vehicle):
        for day, km in ((1, 100), (3, 300), (2, 200)):
            gateway.insert('charges', {
                'vehicle_id': vehicle.id, 'date': datetime(2026, 10, day), 'total_km': km,
                'status': ChargeStatus.COMPLETED,
            })
        rows = gateway.select_all('charges', newest_first=True, vehicle_id=vehicle.id)
        assert [r.total_km for r in rows] == [300, 200, 100]

    def test_unknown_table(self, gateway):
        with pytest.raises(ValueError):
            gateway.select_all('trips')

    def test_missing_record(self, gateway):
        with pytest.raises(NotFoundError):
            gateway.delete('vehicles', 12345)


class TestFailures:
    def test_second_open_session_rejected_by_index(self, gateway, vehicle):
        values = {'vehicle_id': vehicle.id, 'date': datetime(2026, 10, 1), 'total_km': 100,
                  'status': ChargeStatus.IN_PROGRESS}
        gateway.insert('charges', values)
        with pytest.raises(ConflictError):
            gateway.insert('charges', dict(values, total_km=110))
        assert len(gateway.select_all('charges')) == 1

    def test_missing_table_is_distinguished(self, gateway):
        with pytest.raises(MissingTablesError) as excinfo:
            with gateway._remote_call('load', 'charges'):
                raise OperationalError('SELECT * FROM charges', {}, Exception('no such table: charges'))
        assert 'flask setup-db' in excinfo.value.message
        assert excinfo.value.status_code == 503

    def test_other_database_errors_are_remote_errors(self, gateway):
        with pytest.raises(RemoteError) as excinfo:
            with gateway._remote_call('update', 'suppliers'):
                raise OperationalError('UPDATE suppliers', {}, Exception('database is locked'))
        assert not isinstance(excinfo.value, MissingTablesError)
        assert 'database is locked' in excinfo.value.message


class TestSetup:
    def test_setup_is_idempotent(self, gateway):
        first = setup_ledger(gateway)
        second = setup_ledger(gateway)
        assert first['home_supplier'] == second['home_supplier'] == 'Casa'
        assert 'charges' in first['tables']
        assert len(gateway.select_all('suppliers')) == 1
        assert len(gateway.select_all('settings')) == 1
