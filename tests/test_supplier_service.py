"""
Tests for SupplierService: the protected home supplier, name uniqueness and
what happens to charge sessions when their supplier goes away.
"""
from datetime import datetime

import pytest

from models.suppliers import HOME_SUPPLIER_NAME, SupplierKind
from services.charge_service import ChargeSessionService
from services.errors import ConflictError, NotFoundError, ValidationError
from services.supplier_service import SupplierService


# ---------------------------------------------------------------------------
# Home supplier
# ---------------------------------------------------------------------------

class TestHomeSupplier:
    def test_ensure_creates_casa_once(self, gateway):
        first = SupplierService.ensure_home_supplier(gateway)
        second = SupplierService.ensure_home_supplier(gateway)
        assert first.id == second.id
        assert first.name == HOME_SUPPLIER_NAME
        assert first.kind == SupplierKind.HOME
        assert len(SupplierService.list_suppliers(gateway)) == 1

    def test_home_supplier_cannot_be_deleted(self, gateway, home_supplier):
        with pytest.raises(ConflictError):
            SupplierService.delete_supplier(gateway, home_supplier.id)
        assert gateway.get('suppliers', home_supplier.id)

    def test_home_supplier_with_sessions_cannot_be_deleted(self, gateway, config, vehicle, home_supplier):
        ChargeSessionService(gateway, config).save_manual(
            vehicle.id, home_supplier.id, total_km=1000, kwh_added=30, date=datetime(2026, 10, 1)
        )
        with pytest.raises(ConflictError):
            SupplierService.delete_supplier(gateway, home_supplier.id)

    def test_renamed_home_supplier_is_still_protected(self, gateway, home_supplier):
        SupplierService.update_supplier(gateway, home_supplier.id, name='Home')
        with pytest.raises(ConflictError):
            SupplierService.delete_supplier(gateway, home_supplier.id)

    def test_second_home_supplier_is_refused(self, gateway, home_supplier):
        with pytest.raises(ConflictError):
            SupplierService.create_supplier(gateway, name='Garage', kind=SupplierKind.HOME)

    @pytest.mark.parametrize('name', [HOME_SUPPLIER_NAME, 'casa', ' CASA '])
    def test_home_name_is_reserved_on_create(self, gateway, name):
        with pytest.raises(ConflictError):
            SupplierService.create_supplier(gateway, name=name)
        assert SupplierService.list_suppliers(gateway) == []

    def test_home_name_stays_reserved_after_rename(self, gateway, home_supplier):
        SupplierService.update_supplier(gateway, home_supplier.id, name='Home')
        with pytest.raises(ConflictError):
            SupplierService.create_supplier(gateway, name=HOME_SUPPLIER_NAME)

        renamed_back = SupplierService.update_supplier(gateway, home_supplier.id, name=HOME_SUPPLIER_NAME)
        assert renamed_back.name == HOME_SUPPLIER_NAME

    def test_external_supplier_cannot_take_home_name(self, gateway, external_supplier):
        with pytest.raises(ConflictError):
            SupplierService.update_supplier(gateway, external_supplier.id, name='Casa')

    def test_legacy_casa_row_is_adopted(self, gateway):
        legacy = gateway.insert('suppliers', {
            'name': HOME_SUPPLIER_NAME, 'type': 'AC', 'standard_cost': 0.2, 'kind': SupplierKind.EXTERNAL,
        })

        home = SupplierService.ensure_home_supplier(gateway)
        assert home.id == legacy.id
        assert home.kind == SupplierKind.HOME
        assert len(SupplierService.list_suppliers(gateway)) == 1
        with pytest.raises(ConflictError):
            SupplierService.delete_supplier(gateway, legacy.id)

    def test_setup_succeeds_over_legacy_casa_row(self, gateway):
        from services.setup_service import setup_ledger
        gateway.insert('suppliers', {
            'name': HOME_SUPPLIER_NAME, 'type': 'AC', 'standard_cost': 0.0, 'kind': SupplierKind.EXTERNAL,
        })
        assert setup_ledger(gateway)['home_supplier'] == HOME_SUPPLIER_NAME
        assert SupplierService.get_home_supplier(gateway) is not None

    def test_supplier_named_casa_is_never_deleted(self, gateway):
        legacy = gateway.insert('suppliers', {
            'name': HOME_SUPPLIER_NAME, 'type': 'AC', 'standard_cost': 0.0, 'kind': SupplierKind.EXTERNAL,
        })
        with pytest.raises(ConflictError):
            SupplierService.delete_supplier(gateway, legacy.id)


# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------

class TestCreateAndUpdate:
    def test_create_external_supplier(self, gateway):
        supplier = SupplierService.create_supplier(
            gateway, name='  Enel X ', supplier_type='AC', standard_cost=0.45
        )
        assert supplier.name == 'Enel X'
        assert supplier.kind == SupplierKind.EXTERNAL
        assert supplier.sort_order == 9

    def test_duplicate_name_is_a_conflict(self, gateway, external_supplier):
        with pytest.raises(ConflictError):
            SupplierService.create_supplier(gateway, name='Ionity', supplier_type='DC')

    @pytest.mark.parametrize('kwargs', [
        dict(name='', supplier_type='AC', standard_cost=0.3),
        dict(name='Tesla SC', supplier_type='HPC', standard_cost=0.3),
        dict(name='Tesla SC', supplier_type='DC', standard_cost=-1),
    ])
    def test_invalid_supplier(self, gateway, kwargs):
        with pytest.raises(ValidationError):
            SupplierService.create_supplier(gateway, **kwargs)

    def test_update_price(self, gateway, external_supplier):
        updated = SupplierService.update_supplier(gateway, external_supplier.id, standard_cost=0.69)
        assert updated.standard_cost == pytest.approx(0.69)

    def test_kind_is_not_editable(self, gateway, external_supplier):
        with pytest.raises(ValidationError):
            SupplierService.update_supplier(gateway, external_supplier.id, kind=SupplierKind.HOME)

    def test_rename_onto_existing_name(self, gateway, home_supplier, external_supplier):
        with pytest.raises(ConflictError):
            SupplierService.update_supplier(gateway, external_supplier.id, name=HOME_SUPPLIER_NAME)

    def test_favourites_listed_first(self, gateway, home_supplier):
        SupplierService.create_supplier(gateway, name='Zeta', sort_order=1)
        SupplierService.create_supplier(gateway, name='Alpha', sort_order=1)
        SupplierService.create_supplier(gateway, name='Beta', is_favorite=True, sort_order=5)

        names = [s.name for s in SupplierService.list_suppliers(gateway)]
        assert names == [HOME_SUPPLIER_NAME, 'Beta', 'Alpha', 'Zeta']


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDelete:
    def test_sessions_keep_their_snapshot(self, gateway, config, vehicle, external_supplier):
        session = ChargeSessionService(gateway, config).save_manual(
            vehicle.id, external_supplier.id, total_km=1000, kwh_added=30, cost=15,
            date=datetime(2026, 10, 1)
        )

        detached = SupplierService.delete_supplier(gateway, external_supplier.id)
        assert detached == 1

        stored = gateway.get('charges', session.id)
        assert stored.supplier_id is None
        assert stored.supplier_name == 'Ionity'
        assert stored.supplier_type == 'DC'

    def test_double_delete_is_not_found(self, gateway, external_supplier):
        SupplierService.delete_supplier(gateway, external_supplier.id)
        with pytest.raises(NotFoundError):
            SupplierService.delete_supplier(gateway, external_supplier.id)
