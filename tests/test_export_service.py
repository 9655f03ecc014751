"""
Tests for the CSV export of charge sessions.
"""
import csv
import io
from datetime import datetime

from services.charge_service import ChargeSessionService
from services.export_service import EXPORT_COLUMNS, charges_to_csv


def _rows(text):
    return list(csv.DictReader(io.StringIO(text)))


class TestChargesToCsv:
    def test_header_only_for_no_charges(self):
        assert charges_to_csv([]) == ','.join(EXPORT_COLUMNS) + '\n'

    def test_values_and_empty_cells(self, gateway, config, vehicle, home_supplier):
        service = ChargeSessionService(gateway, config)
        service.save_manual(vehicle.id, home_supplier.id, total_km=1000, kwh_added=30,
                            date=datetime(2026, 10, 1, 21, 30))

        rows = _rows(charges_to_csv(service.completed_sessions(vehicle.id)))
        assert len(rows) == 1
        row = rows[0]
        assert row['supplier_name'] == 'Casa'
        assert row['date'] == '2026-10-01T21:30:00'
        assert row['status'] == 'completed'
        assert float(row['cost']) == 7.5
        # First session: no delta, no standard cost comparison
        assert row['km_since_last'] == ''
        assert row['consumption'] == ''
        assert row['cost_difference'] == ''
        assert row['end_date'] == ''
