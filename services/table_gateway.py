"""
Table Gateway
=============
Table-by-name access to the ledger's storage: select-all, get, insert, update and
delete.  No joins happen here; every write is a single-table operation committed on
its own, so a failed write never leaves a partial change behind.

Failures coming from SQLAlchemy roll the session back and are re-raised as
``RemoteError`` with the driver's message; a unique key violation becomes a
``ConflictError``.  A missing table (first run before
``flask setup-db``) is reported as ``MissingTablesError``.

Usage
-----
::

    gateway = TableGateway()
    charges = gateway.select_all('charges', newest_first=True, vehicle_id=3)
    row = gateway.insert('suppliers', {'name': 'Ionity', 'type': 'DC', 'standard_cost': 0.59})
    gateway.update('suppliers', row.id, {'standard_cost': 0.69})
    gateway.delete('suppliers', row.id)
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from models.charges import ChargeSession
from models.preferences import Preference
from models.settings import Settings
from models.suppliers import Supplier
from models.vehicles import Vehicle
from services.errors import ConflictError, MissingTablesError, NotFoundError, RemoteError

logger = logging.getLogger(__name__)

TABLES = {
    'vehicles': Vehicle,
    'suppliers': Supplier,
    'charges': ChargeSession,
    'settings': Settings,
    'preferences': Preference,
}

_MISSING_TABLE_MARKERS = ('no such table', 'does not exist', "doesn't exist", 'undefinedtable')


def _is_missing_table(exc):
    message = str(getattr(exc, 'orig', None) or exc).lower()
    return any(marker in message for marker in _MISSING_TABLE_MARKERS)


class TableGateway:
    """Load and save ledger records by table name."""

    def __init__(self, session=None):
        self.session = session or db.session

    @staticmethod
    def model_for(table):
        try:
            return TABLES[table]
        except KeyError:
            raise ValueError(f'Unknown table "{table}"')

    @contextmanager
    def _remote_call(self, action, table):
        try:
            yield
        except IntegrityError as exc:
            # Unique keys: supplier names, one open session per vehicle
            self.session.rollback()
            logger.warning(f'{action} {table} rejected: {exc.orig}')
            raise ConflictError(f'Conflicting {table} record: {exc.orig}') from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            if _is_missing_table(exc):
                logger.error(f'{action} {table}: tables missing ({exc})')
                raise MissingTablesError(details=str(getattr(exc, 'orig', exc))) from exc
            logger.error(f'{action} {table} failed: {exc}')
            raise RemoteError(f'Database error while trying to {action} {table}: '
                              f'{getattr(exc, "orig", exc)}') from exc

    def _ordering(self, model, newest_first):
        if newest_first and hasattr(model, 'date'):
            return [model.date.desc(), model.id.desc()]
        if model is Supplier:
            return [Supplier.is_favorite.desc(), Supplier.sort_order.asc(), Supplier.name.asc()]
        return [model.id.asc()]

    def select_all(self, table, newest_first=False, **filters):
        """All rows of *table* matching the equality *filters*.

        ``newest_first`` orders by ``date`` descending where the table has one.
        """
        model = self.model_for(table)
        with self._remote_call('load', table):
            query = model.query.filter_by(**filters)
            return query.order_by(*self._ordering(model, newest_first)).all()

    def get(self, table, record_id):
        model = self.model_for(table)
        with self._remote_call('load', table):
            row = self.session.get(model, record_id)
        if row is None:
            raise NotFoundError(f'No {table} record with id {record_id}')
        return row

    def insert(self, table, values):
        """Insert one row and return it (with its id)."""
        model = self.model_for(table)
        with self._remote_call('insert into', table):
            row = model(**values)
            self.session.add(row)
            self.session.commit()
        logger.debug(f'inserted {table} id={row.id}')
        return row

    def update(self, table, record_id, values):
        row = self.get(table, record_id)
        with self._remote_call('update', table):
            for column, value in values.items():
                setattr(row, column, value)
            self.session.commit()
        logger.debug(f'updated {table} id={record_id}: {sorted(values)}')
        return row

    def delete(self, table, record_id):
        row = self.get(table, record_id)
        with self._remote_call('delete from', table):
            self.session.delete(row)
            self.session.commit()
        logger.debug(f'deleted {table} id={record_id}')
