from flask import jsonify
from . import suppliers_bp
from .forms import SupplierForm
from models.suppliers import SupplierKind
from services.supplier_service import SupplierService
from utils.forms import validated_form, supplied_data
from utils.request_helpers import get_gateway


def _supplier_data():
    data = supplied_data(validated_form(SupplierForm))
    if 'kind' in data:
        data['kind'] = SupplierKind(data['kind'])
    return data


@suppliers_bp.route('/suppliers', methods=['GET'])
def list_suppliers():
    """Suppliers, favourites first"""
    suppliers = SupplierService.list_suppliers(get_gateway())
    return jsonify([s.to_dict() for s in suppliers])


@suppliers_bp.route('/suppliers', methods=['POST'])
def create_supplier():
    data = _supplier_data()
    supplier = SupplierService.create_supplier(
        get_gateway(),
        name=data.get('name'),
        supplier_type=data.get('type', 'AC'),
        standard_cost=data.get('standard_cost', 0.0),
        kind=data.get('kind', SupplierKind.EXTERNAL),
        is_favorite=data.get('is_favorite', False),
        sort_order=data.get('sort_order', 9),
    )
    return jsonify(supplier.to_dict()), 201


@suppliers_bp.route('/suppliers/<int:supplier_id>', methods=['PUT'])
def update_supplier(supplier_id):
    supplier = SupplierService.update_supplier(get_gateway(), supplier_id, **_supplier_data())
    return jsonify(supplier.to_dict())


@suppliers_bp.route('/suppliers/<int:supplier_id>', methods=['DELETE'])
def delete_supplier(supplier_id):
    detached = SupplierService.delete_supplier(get_gateway(), supplier_id)
    return jsonify({'deleted': supplier_id, 'charges_detached': detached})
