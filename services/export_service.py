"""
CSV export of charge sessions.

Columns follow the ``charges`` table; nulls become empty cells and datetimes are
written in ISO format.  Used for backups before deleting a vehicle and by the
``flask export-charges`` command.
"""
import csv
import io

EXPORT_COLUMNS = (
    'id', 'vehicle_id', 'supplier_id', 'supplier_name', 'supplier_type',
    'date', 'end_date', 'total_km', 'battery_start', 'battery_end',
    'kwh_added', 'cost', 'standard_cost', 'cost_difference',
    'km_since_last', 'consumption', 'status',
    'saved_gasoline_price', 'saved_diesel_price',
    'saved_gasoline_consumption', 'saved_diesel_consumption', 'notes',
)


def charges_to_csv(charges):
    """Render *charges* as CSV text (header only for an empty list)."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator='\n')
    writer.writeheader()
    for charge in charges:
        row = charge.to_dict()
        writer.writerow({
            column: '' if row.get(column) is None else row[column]
            for column in EXPORT_COLUMNS
        })
    return buffer.getvalue()
