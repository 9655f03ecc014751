"""
Supplier Service
================
Manage charging suppliers.

The household supplier ("Casa") is a singleton of kind HOME: it is created by
``ensure_home_supplier()`` during setup, priced from the home electricity rate in
settings, and can never be deleted.  The name "Casa" is reserved for it: no other
supplier may be created or renamed to it, and a legacy row already called "Casa" is
adopted as the home supplier.  Deleting any other supplier keeps its charge
sessions; they still carry the supplier name and type captured when they were
recorded.
"""
import logging

from models.suppliers import HOME_SUPPLIER_NAME, SUPPLIER_TYPES, SupplierKind
from services.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'type', 'standard_cost', 'is_favorite', 'sort_order')


class SupplierService:

    @staticmethod
    def _validate(name, supplier_type, standard_cost):
        errors = {}
        if not name or not str(name).strip():
            errors['name'] = ['Name is required']
        if supplier_type not in SUPPLIER_TYPES:
            errors['type'] = [f'Type must be one of {", ".join(SUPPLIER_TYPES)}']
        if standard_cost is None or standard_cost < 0:
            errors['standard_cost'] = ['Standard cost must be zero or more']
        if errors:
            raise ValidationError('Invalid supplier', errors)

    @staticmethod
    def _ensure_unique_name(gateway, name, supplier_id=None):
        for existing in gateway.select_all('suppliers', name=name):
            if existing.id != supplier_id:
                raise ConflictError(f'A supplier named "{name}" already exists')

    @staticmethod
    def _ensure_name_not_reserved(name, kind):
        if kind != SupplierKind.HOME and name.casefold() == HOME_SUPPLIER_NAME.casefold():
            raise ConflictError(f'The name "{HOME_SUPPLIER_NAME}" is reserved for the home supplier')

    @staticmethod
    def list_suppliers(gateway):
        return gateway.select_all('suppliers')

    @staticmethod
    def get_home_supplier(gateway):
        homes = gateway.select_all('suppliers', kind=SupplierKind.HOME)
        return homes[0] if homes else None

    @staticmethod
    def ensure_home_supplier(gateway, standard_cost=0.0):
        """Return the home supplier, creating "Casa" if it does not exist yet."""
        home = SupplierService.get_home_supplier(gateway)
        if home:
            return home

        # A row already called "Casa" (older data) becomes the home supplier
        named = gateway.select_all('suppliers', name=HOME_SUPPLIER_NAME)
        if named:
            home = gateway.update('suppliers', named[0].id, {'kind': SupplierKind.HOME})
            logger.info(f'supplier {home.id} "{home.name}" adopted as home supplier')
            return home
        home = gateway.insert('suppliers', {
            'name': HOME_SUPPLIER_NAME,
            'type': 'AC',
            'standard_cost': standard_cost,
            'kind': SupplierKind.HOME,
            'is_favorite': True,
            'sort_order': 0,
        })
        logger.info(f'home supplier "{home.name}" created (id={home.id})')
        return home

    @staticmethod
    def create_supplier(gateway, name, supplier_type='AC', standard_cost=0.0,
                        kind=SupplierKind.EXTERNAL, is_favorite=False, sort_order=9):
        SupplierService._validate(name, supplier_type, standard_cost)
        name = name.strip()
        SupplierService._ensure_name_not_reserved(name, kind)
        SupplierService._ensure_unique_name(gateway, name)
        if kind == SupplierKind.HOME and SupplierService.get_home_supplier(gateway):
            raise ConflictError('There is already a home supplier')

        supplier = gateway.insert('suppliers', {
            'name': name,
            'type': supplier_type,
            'standard_cost': standard_cost,
            'kind': kind,
            'is_favorite': is_favorite,
            'sort_order': sort_order,
        })
        logger.info(f'supplier {supplier.id} created: {supplier.name} ({supplier.type}, {kind.value})')
        return supplier

    @staticmethod
    def update_supplier(gateway, supplier_id, **changes):
        supplier = gateway.get('suppliers', supplier_id)
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f'Cannot edit supplier field(s): {", ".join(sorted(unknown))}')

        name = changes.get('name', supplier.name)
        SupplierService._validate(
            name,
            changes.get('type', supplier.type),
            changes.get('standard_cost', supplier.standard_cost),
        )
        if 'name' in changes:
            changes['name'] = name.strip()
            SupplierService._ensure_name_not_reserved(changes['name'], supplier.kind)
            SupplierService._ensure_unique_name(gateway, changes['name'], supplier_id)
        return gateway.update('suppliers', supplier_id, changes)

    @staticmethod
    def delete_supplier(gateway, supplier_id):
        """
        Delete a supplier, detaching (not deleting) its charge sessions.

        Raises:
            ConflictError: for the home supplier, whatever references it.
        """
        supplier = gateway.get('suppliers', supplier_id)
        if supplier.is_home or supplier.name == HOME_SUPPLIER_NAME:
            raise ConflictError(f'The home supplier "{supplier.name}" cannot be deleted')

        charges = gateway.select_all('charges', supplier_id=supplier_id)
        for charge in charges:
            gateway.update('charges', charge.id, {'supplier_id': None})
        gateway.delete('suppliers', supplier_id)
        logger.info(f'supplier {supplier_id} ({supplier.name}) deleted; '
                    f'{len(charges)} charge sessions keep their snapshot')
        return len(charges)
