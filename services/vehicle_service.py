"""
Vehicle Service
===============
Create, edit and delete vehicles.

A vehicle's battery capacity is fixed once charge sessions reference it; name,
brand and picture stay editable.  Deleting a vehicle removes its charge sessions
first, then the vehicle itself.
"""
import logging

from services.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'brand', 'capacity_kwh', 'image_url')


class VehicleService:

    @staticmethod
    def _validate(name, capacity_kwh):
        errors = {}
        if not name or not str(name).strip():
            errors['name'] = ['Name is required']
        if capacity_kwh is None:
            errors['capacity_kwh'] = ['Battery capacity is required']
        elif capacity_kwh <= 0:
            errors['capacity_kwh'] = ['Battery capacity must be greater than zero']
        if errors:
            raise ValidationError('Invalid vehicle', errors)

    @staticmethod
    def list_vehicles(gateway):
        return gateway.select_all('vehicles')

    @staticmethod
    def create_vehicle(gateway, name, capacity_kwh, brand=None, image_url=None):
        VehicleService._validate(name, capacity_kwh)
        vehicle = gateway.insert('vehicles', {
            'name': name.strip(),
            'brand': brand,
            'capacity_kwh': capacity_kwh,
            'image_url': image_url,
        })
        logger.info(f'vehicle {vehicle.id} created: {vehicle.name} ({vehicle.capacity_kwh} kWh)')
        return vehicle

    @staticmethod
    def update_vehicle(gateway, vehicle_id, **changes):
        vehicle = gateway.get('vehicles', vehicle_id)
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f'Cannot edit vehicle field(s): {", ".join(sorted(unknown))}')

        VehicleService._validate(
            changes.get('name', vehicle.name),
            changes.get('capacity_kwh', vehicle.capacity_kwh),
        )

        capacity = changes.get('capacity_kwh')
        if capacity is not None and capacity != vehicle.capacity_kwh:
            if gateway.select_all('charges', vehicle_id=vehicle_id):
                raise ConflictError(
                    f'Battery capacity of "{vehicle.name}" cannot change: it already has charge sessions'
                )

        if 'name' in changes:
            changes['name'] = changes['name'].strip()
        return gateway.update('vehicles', vehicle_id, changes)

    @staticmethod
    def delete_vehicle(gateway, vehicle_id, config=None):
        """
        Delete a vehicle and all of its charge sessions.

        When *config* remembers this vehicle as the last selected one, the selection
        moves to the first remaining vehicle (or is cleared).
        """
        vehicle = gateway.get('vehicles', vehicle_id)
        charges = gateway.select_all('charges', vehicle_id=vehicle_id)
        for charge in charges:
            gateway.delete('charges', charge.id)
        gateway.delete('vehicles', vehicle_id)
        logger.info(f'vehicle {vehicle_id} ({vehicle.name}) deleted with {len(charges)} charge sessions')

        if config is not None and config.last_vehicle_id == vehicle_id:
            remaining = gateway.select_all('vehicles')
            if remaining:
                config.select_vehicle(remaining[0].id, gateway)
            else:
                config.last_vehicle_id = None
                config.save(gateway)
        return len(charges)
