"""
Vendor routes
"""
from flask import jsonify, request

from gym_backoffice.buisness.inventory.vendors.vendor_manager import VendorManager
from gym_backoffice.presentation.routes.inventory.responses import action_response, json_body
from gym_backoffice.services.inventory.vendor_view_service import VendorViewService


def register_vendor_routes(inventory_bp):
    """Register all vendor routes to the inventory blueprint"""

    @inventory_bp.route('/vendors/stats', methods=['GET'])
    def vendor_stats():
        return jsonify(VendorViewService.get_stats())

    @inventory_bp.route('/vendors/chart/spending', methods=['GET'])
    def vendor_spending_chart():
        return jsonify(VendorViewService.get_spending_chart())

    @inventory_bp.route('/vendors/chart/trends', methods=['GET'])
    def vendor_trends_chart():
        return jsonify(VendorViewService.get_order_trends())

    @inventory_bp.route('/vendors', methods=['GET'])
    def list_vendors():
        return jsonify({'vendors': VendorViewService.list_vendors(request.args)})

    @inventory_bp.route('/vendors/<int:vendor_id>', methods=['GET'])
    def get_vendor(vendor_id):
        return jsonify(VendorViewService.get_vendor(vendor_id))

    @inventory_bp.route('/vendors/<int:vendor_id>/orders', methods=['GET'])
    def vendor_orders(vendor_id):
        return jsonify({'orders': VendorViewService.get_vendor_orders(vendor_id)})

    @inventory_bp.route('/vendors', methods=['POST'])
    def create_vendor():
        result = VendorManager.create_vendor(json_body())
        return action_response("Vendor added successfully", 'vendor', result, status_code=201)

    @inventory_bp.route('/vendors/<int:vendor_id>', methods=['PUT'])
    def update_vendor(vendor_id):
        result = VendorManager.update_vendor(vendor_id, json_body())
        return action_response("Vendor updated successfully", 'vendor', result)

    @inventory_bp.route('/vendors/<int:vendor_id>', methods=['DELETE'])
    def deactivate_vendor(vendor_id):
        result = VendorManager.deactivate_vendor(vendor_id)
        return action_response("Vendor deactivated successfully", 'vendor', result)
