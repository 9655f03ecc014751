"""
Charge Session Service
======================
Lifecycle of charge sessions: start → stop for live charging, or a one-shot manual
entry, plus cancel, edit and delete.

Session state
-------------
Each vehicle is either NONE_OPEN or IN_PROGRESS (exactly one open session).
``get_state()`` returns that state as a ``VehicleChargeState``; ``start()`` refuses
to open a second session, and the ``charges`` table carries a partial unique index
on open sessions per vehicle as a backstop.

Completion
----------
When a session completes (stop, manual entry) its derived fields are computed once
against the most recent *other* completed session of the same vehicle, and the fuel
prices of the current ``LedgerConfig`` are copied onto it.  Deleting a session does
not touch the derived fields of its neighbours; editing a session's odometer
recomputes the next completed session only.

Cost rules
----------
A cost entered by the user is always kept.  Without one, the home supplier is
priced at ``home_electricity_price``, a solar supplier at
``solar_electricity_price``, and any other supplier records 0.

Primary entry points
--------------------
  start()        - open a session (odometer, battery %, supplier)
  stop()         - complete the open session (battery %, kWh, cost, end date)
  save_manual()  - record a completed session in one step
  cancel()       - discard the vehicle's open session
  update()       - edit a completed session, cascading the odometer change
  delete()       - remove a session
"""
import enum
import logging
from dataclasses import dataclass

from models.charges import ChargeStatus, ChargeSession
from models.suppliers import SupplierKind
from services.charge_metrics_service import ChargeMetricsService
from services.errors import ConflictError, NotFoundError, ValidationError
from utils.dates import utcnow

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'date', 'total_km', 'battery_start', 'battery_end',
    'kwh_added', 'cost', 'supplier_id', 'notes',
)


class SessionState(enum.Enum):
    NONE_OPEN = 'none_open'
    IN_PROGRESS = 'in_progress'


@dataclass(frozen=True)
class VehicleChargeState:
    vehicle_id: int
    state: SessionState
    open_session: ChargeSession = None

    @property
    def is_open(self):
        return self.state == SessionState.IN_PROGRESS

    def to_dict(self):
        return {
            'vehicle_id': self.vehicle_id,
            'state': self.state.value,
            'open_session': self.open_session.to_dict() if self.open_session else None,
        }


def _require(**values):
    missing = {name: ['This field is required'] for name, value in values.items() if value is None}
    if missing:
        raise ValidationError(f'Missing required field(s): {", ".join(sorted(missing))}', missing)


def _check_range(errors, name, value, low=None, high=None):
    if value is None:
        return
    if (low is not None and value < low) or (high is not None and value > high):
        if high is None:
            errors[name] = [f'Must be {low} or more']
        else:
            errors[name] = [f'Must be between {low} and {high}']


def _validate_ranges(battery_start=None, battery_end=None, kwh_added=None, total_km=None, cost=None):
    errors = {}
    _check_range(errors, 'battery_start', battery_start, 0, 100)
    _check_range(errors, 'battery_end', battery_end, 0, 100)
    _check_range(errors, 'kwh_added', kwh_added, 0)
    _check_range(errors, 'total_km', total_km, 0)
    _check_range(errors, 'cost', cost, 0)
    if errors:
        raise ValidationError('Invalid charge data', errors)


class ChargeSessionService:
    """
    Enforces the open/completed transitions of charge sessions.

    Args:
        gateway: ``TableGateway`` used for every load and save.
        config:  ``LedgerConfig`` with the prices in effect for this request.
    """

    def __init__(self, gateway, config):
        self.gateway = gateway
        self.config = config

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_state(self, vehicle_id):
        """Whether *vehicle_id* has an open session, and which one."""
        open_sessions = self.gateway.select_all(
            'charges', newest_first=True, vehicle_id=vehicle_id, status=ChargeStatus.IN_PROGRESS
        )
        if open_sessions:
            return VehicleChargeState(vehicle_id, SessionState.IN_PROGRESS, open_sessions[0])
        return VehicleChargeState(vehicle_id, SessionState.NONE_OPEN)

    def completed_sessions(self, vehicle_id):
        """Completed sessions of a vehicle, most recent first."""
        return self.gateway.select_all(
            'charges', newest_first=True, vehicle_id=vehicle_id, status=ChargeStatus.COMPLETED
        )

    def _previous_completed(self, vehicle_id, exclude_id=None, before=None):
        for session in self.completed_sessions(vehicle_id):
            if session.id == exclude_id:
                continue
            if before is not None and session.date >= before:
                continue
            return session
        return None

    def _next_completed(self, vehicle_id, exclude_id, after):
        later = [
            s for s in self.completed_sessions(vehicle_id)
            if s.id != exclude_id and s.date > after
        ]
        return later[-1] if later else None

    def _supplier_or_none(self, supplier_id):
        if supplier_id is None:
            return None
        try:
            return self.gateway.get('suppliers', supplier_id)
        except NotFoundError:
            return None

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def _resolve_cost(self, supplier, kwh_added, cost):
        if cost is not None:
            return cost
        if supplier is not None and supplier.kind == SupplierKind.HOME:
            return kwh_added * self.config.home_electricity_price
        if supplier is not None and supplier.kind == SupplierKind.SOLAR:
            return kwh_added * self.config.solar_electricity_price
        return 0.0

    @staticmethod
    def _cost_difference(cost, kwh_added, standard_cost):
        if standard_cost and standard_cost > 0:
            return cost - kwh_added * standard_cost
        return None

    def _delta_against_previous(self, vehicle_id, total_km, kwh_added, exclude_id=None, before=None):
        previous = self._previous_completed(vehicle_id, exclude_id=exclude_id, before=before)
        previous_km = previous.total_km if previous else None
        return ChargeMetricsService.compute_delta(total_km, previous_km, kwh_added)

    @staticmethod
    def _supplier_snapshot(supplier):
        return {
            'supplier_id': supplier.id,
            'supplier_name': supplier.name,
            'supplier_type': supplier.type,
            'standard_cost': supplier.standard_cost or 0.0,
        }

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, vehicle_id, supplier_id, total_km, battery_start, date=None, notes=None):
        """
        Open a charge session for a vehicle.

        Raises:
            ValidationError: odometer, battery start or supplier missing / out of range.
            NotFoundError:   unknown vehicle or supplier.
            ConflictError:   the vehicle already has an open session.
        """
        _require(supplier_id=supplier_id, total_km=total_km, battery_start=battery_start)
        _validate_ranges(battery_start=battery_start, total_km=total_km)

        self.gateway.get('vehicles', vehicle_id)
        supplier = self.gateway.get('suppliers', supplier_id)

        state = self.get_state(vehicle_id)
        if state.is_open:
            raise ConflictError(
                f'Vehicle {vehicle_id} already has a charge in progress (session {state.open_session.id})'
            )

        values = self._supplier_snapshot(supplier)
        values.update({
            'vehicle_id': vehicle_id,
            'date': date or utcnow(),
            'total_km': total_km,
            'battery_start': battery_start,
            'status': ChargeStatus.IN_PROGRESS,
            'notes': notes,
        })
        session = self.gateway.insert('charges', values)
        logger.info(f'vehicle {vehicle_id}: charge {session.id} started at {total_km} km '
                    f'({battery_start}%) with {supplier.name}')
        return session

    def stop(self, charge_id, battery_end, kwh_added, cost=None, end_date=None, notes=None):
        """
        Complete an open session.

        Raises:
            ValidationError: battery end or kWh missing / out of range.
            NotFoundError:   unknown session.
            ConflictError:   the session is not in progress.
        """
        session = self.gateway.get('charges', charge_id)
        if not session.is_open:
            raise ConflictError(f'Charge {charge_id} is not in progress')

        _require(battery_end=battery_end, kwh_added=kwh_added)
        _validate_ranges(battery_end=battery_end, kwh_added=kwh_added, cost=cost)

        end_date = end_date or utcnow()
        if end_date < session.date:
            raise ValidationError('End date cannot be before the start of the charge',
                                  {'end_date': ['Must not be before the start date']})

        supplier = self._supplier_or_none(session.supplier_id)
        final_cost = self._resolve_cost(supplier, kwh_added, cost)
        km_since_last, consumption = self._delta_against_previous(
            session.vehicle_id, session.total_km, kwh_added, exclude_id=session.id
        )

        values = {
            'end_date': end_date,
            'battery_end': battery_end,
            'kwh_added': kwh_added,
            'cost': final_cost,
            'cost_difference': self._cost_difference(final_cost, kwh_added, session.standard_cost),
            'km_since_last': km_since_last,
            'consumption': consumption,
            'status': ChargeStatus.COMPLETED,
        }
        values.update(self.config.prices_snapshot())
        if notes is not None:
            values['notes'] = notes

        session = self.gateway.update('charges', charge_id, values)
        logger.info(f'vehicle {session.vehicle_id}: charge {charge_id} completed, '
                    f'{kwh_added} kWh for €{final_cost:.2f}, km_since_last={km_since_last}')
        return session

    def save_manual(self, vehicle_id, supplier_id, total_km, kwh_added, cost=None,
                    battery_start=None, battery_end=None, date=None, notes=None):
        """
        Record a completed session in one step.

        Manual entries do not care about an open live session on the same vehicle;
        the two are ordered by date only when later sessions look up their
        predecessor.
        """
        _require(supplier_id=supplier_id, total_km=total_km, kwh_added=kwh_added)
        _validate_ranges(battery_start=battery_start, battery_end=battery_end,
                         kwh_added=kwh_added, total_km=total_km, cost=cost)

        self.gateway.get('vehicles', vehicle_id)
        supplier = self.gateway.get('suppliers', supplier_id)

        final_cost = self._resolve_cost(supplier, kwh_added, cost)
        km_since_last, consumption = self._delta_against_previous(vehicle_id, total_km, kwh_added)

        values = self._supplier_snapshot(supplier)
        values.update({
            'vehicle_id': vehicle_id,
            'date': date or utcnow(),
            'total_km': total_km,
            'battery_start': battery_start,
            'battery_end': battery_end,
            'kwh_added': kwh_added,
            'cost': final_cost,
            'cost_difference': self._cost_difference(final_cost, kwh_added, values['standard_cost']),
            'km_since_last': km_since_last,
            'consumption': consumption,
            'status': ChargeStatus.COMPLETED,
            'notes': notes,
        })
        values.update(self.config.prices_snapshot())

        session = self.gateway.insert('charges', values)
        logger.info(f'vehicle {vehicle_id}: manual charge {session.id} saved at {total_km} km, '
                    f'{kwh_added} kWh for €{final_cost:.2f}')
        return session

    def cancel(self, vehicle_id):
        """Discard the open session of *vehicle_id*."""
        state = self.get_state(vehicle_id)
        if not state.is_open:
            raise NotFoundError(f'Vehicle {vehicle_id} has no charge in progress')
        self.gateway.delete('charges', state.open_session.id)
        logger.info(f'vehicle {vehicle_id}: charge {state.open_session.id} cancelled')
        return state.open_session.id

    def delete(self, charge_id):
        """
        Delete a session.

        The derived fields of other sessions were computed when they completed and
        are left as they are.
        """
        self.gateway.delete('charges', charge_id)
        logger.info(f'charge {charge_id} deleted')

    def update(self, charge_id, **changes):
        """
        Edit a completed session and recompute its derived fields.

        Passing ``cost=None`` explicitly re-applies the cost rules; leaving ``cost``
        out keeps the stored cost.  When the odometer changes, the next completed
        session of the vehicle gets its distance and consumption recomputed.

        Returns:
            (session, next_session); next_session is None when nothing cascaded.
        """
        session = self.gateway.get('charges', charge_id)
        if session.is_open:
            raise ConflictError(f'Charge {charge_id} is still in progress; stop it before editing')

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f'Cannot edit charge field(s): {", ".join(sorted(unknown))}')

        total_km = changes.get('total_km', session.total_km)
        kwh_added = changes.get('kwh_added', session.kwh_added)
        _require(total_km=total_km, kwh_added=kwh_added)
        _validate_ranges(
            battery_start=changes.get('battery_start'),
            battery_end=changes.get('battery_end'),
            kwh_added=kwh_added,
            total_km=total_km,
            cost=changes.get('cost'),
        )

        values = {k: v for k, v in changes.items() if k not in ('cost', 'supplier_id')}
        values['date'] = changes.get('date') or session.date

        supplier_id = changes.get('supplier_id', session.supplier_id)
        supplier = self._supplier_or_none(supplier_id)
        if 'supplier_id' in changes:
            if supplier is None:
                raise NotFoundError(f'No suppliers record with id {supplier_id}')
            values.update(self._supplier_snapshot(supplier))

        if 'cost' in changes:
            cost = self._resolve_cost(supplier, kwh_added, changes['cost'])
        else:
            cost = session.cost or 0.0
        standard_cost = values.get('standard_cost', session.standard_cost)
        values['cost'] = cost
        values['cost_difference'] = self._cost_difference(cost, kwh_added, standard_cost)

        km_since_last, consumption = self._delta_against_previous(
            session.vehicle_id, total_km, kwh_added, exclude_id=session.id, before=values['date']
        )
        values['km_since_last'] = km_since_last
        values['consumption'] = consumption

        old_km = session.total_km
        session = self.gateway.update('charges', charge_id, values)
        logger.info(f'charge {charge_id} updated: {sorted(changes)}')

        next_session = None
        if old_km is None or abs(total_km - old_km) > 0.1:
            next_session = self._next_completed(session.vehicle_id, session.id, session.date)
            if next_session is not None:
                next_km, next_consumption = ChargeMetricsService.compute_delta(
                    next_session.total_km, total_km, next_session.kwh_added
                )
                next_session = self.gateway.update('charges', next_session.id, {
                    'km_since_last': next_km,
                    'consumption': next_consumption,
                })
                logger.info(f'charge {next_session.id} recomputed after odometer change on {charge_id}')
        return session, next_session
