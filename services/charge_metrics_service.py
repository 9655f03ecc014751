"""
Charge Metrics Service
======================
Per-session deltas, aggregate statistics, efficiency trend analysis and a simple
monthly forecast, all derived from charge sessions already in memory.

Nothing here touches the database: every method takes the sessions (and, where
prices matter, the ledger configuration) as arguments and returns plain values.
Arithmetic edge cases such as a zero denominator are handled by returning zero or
skipping, never by raising.

Session deltas
--------------
Distance and consumption come from comparing the odometer of a session with the
previous completed session of the same vehicle.  The odometer must strictly
increase: a first session, or a reading that did not move forward, leaves both
values null.

Primary entry points
--------------------
  compute_delta()         - km since last session and kWh/100km for one session
  calculate_stats()       - totals, cost per kWh, global consumption, fuel savings, CO2
  calculate_advanced_analysis() - best/worst/recent consumption, trend and efficiency score
  calculate_forecast()    - next-month cost/energy/distance from the last 30 days
  efficiency_badge()      - quartile label for one session's consumption
  budget_status()         - monthly budget usage
"""
from datetime import timedelta

from utils.dates import utcnow
from utils.formatting import to_fixed, to_number


# Reference combustion car: ~100 g CO2/km more than an EV at the tailpipe
CO2_KG_PER_KM = 0.10
# CO2 absorbed by one mature tree in a year
CO2_KG_PER_TREE = 20

# Forecast assumes this many charges in a month
CHARGES_PER_MONTH = 8
FORECAST_WINDOW_DAYS = 30
RECENT_SESSIONS = 5


class ChargeMetricsService:
    """
    Pure calculations over charge sessions.

    Sessions are any objects exposing the ``charges`` columns (``kwh_added``,
    ``cost``, ``total_km``, ``km_since_last``, ``consumption``, ``date`` and the
    ``saved_*`` snapshot).  Lists are expected most-recent-first, the order in which
    the gateway returns them with ``newest_first=True``.
    """

    @staticmethod
    def compute_delta(current_odometer, previous_odometer, kwh_added):
        """
        Distance and consumption since the previous completed session.

        Args:
            current_odometer:  Odometer reading of the session being completed.
            previous_odometer: Reading of the previous completed session, or None.
            kwh_added:         Energy added in this session.

        Returns:
            (km_since_last, consumption), both None when there is no previous
            session or the odometer did not strictly increase.
        """
        if previous_odometer is None or current_odometer is None:
            return None, None
        if current_odometer <= previous_odometer:
            return None, None

        km_since_last = current_odometer - previous_odometer
        consumption = to_number(kwh_added) / km_since_last * 100
        return km_since_last, consumption

    @staticmethod
    def calculate_stats(sessions, settings):
        """
        Aggregate statistics for a list of completed sessions.

        The consumption reported here is recomputed globally from total energy over
        the odometer span; it does not use the per-session ``consumption`` values.
        Fuel savings use each session's saved prices when present and the current
        *settings* otherwise.  Savings may be negative.

        Returns None for an empty list, else a dict of display strings.
        """
        if not sessions:
            return None

        total_kwh = sum(to_number(s.kwh_added) for s in sessions)
        total_cost = sum(to_number(s.cost) for s in sessions)
        avg_cost_per_kwh = total_cost / total_kwh if total_kwh > 0 else 0

        odometers = [to_number(s.total_km) for s in sessions]
        km_driven = max(0, max(odometers) - min(odometers))

        consumption = total_kwh / km_driven * 100 if km_driven > 0 else 0

        gasoline_cost = 0
        diesel_cost = 0
        for session in sessions:
            gas_price = to_number(session.saved_gasoline_price) or to_number(settings.gasoline_price)
            diesel_price = to_number(session.saved_diesel_price) or to_number(settings.diesel_price)
            gas_cons = to_number(session.saved_gasoline_consumption) or to_number(settings.gasoline_consumption)
            diesel_cons = to_number(session.saved_diesel_consumption) or to_number(settings.diesel_consumption)

            # km this charge is good for at the global consumption
            estimated_km = to_number(session.kwh_added) / (consumption / 100) if consumption > 0 else 0

            if gas_cons > 0:
                gasoline_cost += estimated_km / gas_cons * gas_price
            if diesel_cons > 0:
                diesel_cost += estimated_km / diesel_cons * diesel_price

        co2_saved_kg = km_driven * CO2_KG_PER_KM
        trees_saved = co2_saved_kg / CO2_KG_PER_TREE

        return {
            'total_kwh': to_fixed(total_kwh, 2),
            'total_cost': to_fixed(total_cost, 2),
            'avg_cost_per_kwh': to_fixed(avg_cost_per_kwh, 3),
            'km_driven': to_fixed(km_driven, 0),
            'consumption': to_fixed(consumption, 2),
            'gasoline_savings': to_fixed(gasoline_cost - total_cost, 2),
            'diesel_savings': to_fixed(diesel_cost - total_cost, 2),
            'charges_count': len(sessions),
            'co2_saved_kg': to_fixed(co2_saved_kg, 1),
            'trees_saved': to_fixed(trees_saved, 1),
        }

    @staticmethod
    def calculate_advanced_analysis(sessions):
        """
        Consumption trend of the most recent sessions against the vehicle's history.

        Only sessions with a positive consumption and a positive ``km_since_last``
        qualify.  ``trend`` is the last-5 average minus the overall average, so a
        negative trend means consumption is improving.  ``efficiency`` scores the
        last-5 average between the best (100) and worst (0) sessions.
        """
        qualifying = [
            to_number(s.consumption) for s in sessions
            if to_number(s.consumption) > 0 and to_number(s.km_since_last) > 0
        ]
        if not qualifying:
            return None

        best = min(qualifying)
        worst = max(qualifying)
        avg = sum(qualifying) / len(qualifying)

        recent = qualifying[:RECENT_SESSIONS]
        avg_last5 = sum(recent) / len(recent)

        trend = avg_last5 - avg

        # Identical consumption everywhere is perfectly consistent
        efficiency = 100.0
        if worst != best:
            efficiency = 100 - (avg_last5 - best) / (worst - best) * 100
            efficiency = max(0.0, min(100.0, efficiency))

        if trend < -0.5:
            comment = 'Significant improvement over your recent charges.'
        elif trend < 0:
            comment = 'Slight improvement compared with your historical average.'
        elif trend < 0.5:
            comment = 'Consumption is stable compared with your average.'
        else:
            comment = 'Consumption is slightly worse; check driving style or temperature.'

        return {
            'best': best,
            'worst': worst,
            'avg': avg,
            'avg_last5': avg_last5,
            'trend': trend,
            'efficiency': efficiency,
            'comment': comment,
        }

    @staticmethod
    def calculate_forecast(sessions, now=None):
        """
        Forecast next month's cost, energy and distance.

        Uses the per-session averages of the last 30 days and assumes eight charges
        a month, corrected by the cost trend of the five most recent sessions.
        Returns None when no session falls inside the 30-day window, whatever the
        older history holds.
        """
        if not sessions:
            return None

        now = now or utcnow()
        window = timedelta(days=FORECAST_WINDOW_DAYS)
        last30 = [s for s in sessions if s.date is not None and now - s.date <= window]
        if not last30:
            return None

        avg_cost = sum(to_number(s.cost) for s in last30) / len(last30)
        avg_kwh = sum(to_number(s.kwh_added) for s in last30) / len(last30)
        avg_km = sum(to_number(s.km_since_last) for s in last30) / len(last30)

        last5 = sessions[:RECENT_SESSIONS]
        avg_cost_last5 = sum(to_number(s.cost) for s in last5) / len(last5)

        # Positive trend = costs rising
        trend = avg_cost_last5 - avg_cost

        if trend < -0.5:
            comment = 'Costs are decreasing compared with last month.'
        elif trend < 0.2:
            comment = 'Costs are stable compared with last month.'
        else:
            comment = 'Costs are rising; check your suppliers\' rates.'

        return {
            'forecast_cost': avg_cost * CHARGES_PER_MONTH + trend * 2,
            'forecast_kwh': avg_kwh * CHARGES_PER_MONTH,
            'forecast_km': avg_km * CHARGES_PER_MONTH,
            'trend': trend,
            'comment': comment,
        }

    @staticmethod
    def efficiency_badge(consumption, all_consumptions):
        """Label one session's consumption against the quartiles of all sessions."""
        value = to_number(consumption)
        values = sorted(to_number(c, None) for c in all_consumptions if to_number(c, None) is not None)
        if not value or len(values) < 4:
            return 'n/a'

        q1 = values[int(len(values) * 0.25)]
        q3 = values[int(len(values) * 0.75)]
        if value <= q1:
            return 'top'
        if value >= q3:
            return 'high'
        return 'normal'

    @staticmethod
    def average_power_kw(kwh, start, end):
        """Mean charging power (kW, one decimal) or None if it cannot be derived."""
        if not kwh or start is None or end is None:
            return None
        hours = (end - start).total_seconds() / 3600
        if hours <= 0:
            return None
        return to_fixed(to_number(kwh) / hours, 1)

    @staticmethod
    def monthly_spend(sessions, today=None):
        """Total cost of the sessions dated in *today*'s calendar month."""
        today = today or utcnow().date()
        return sum(
            to_number(s.cost) for s in sessions
            if s.date is not None and s.date.year == today.year and s.date.month == today.month
        )

    @staticmethod
    def budget_status(spent, budget, threshold=80):
        """Usage of the monthly budget, or None when no budget is set."""
        if not budget or budget <= 0:
            return None

        percentage = min(spent / budget * 100, 100)
        return {
            'spent': to_fixed(spent, 2),
            'budget': to_fixed(budget, 2),
            'remaining': to_fixed(budget - spent, 2),
            'percentage': to_fixed(percentage, 0),
            'is_warning': threshold <= percentage < 100,
            'is_over': percentage >= 100,
        }
