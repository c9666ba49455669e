"""
Reorder request routes
"""
from flask import jsonify, request

from gym_backoffice.buisness.inventory.reorders.reorder_request_manager import ReorderRequestManager
from gym_backoffice.presentation.routes.inventory.responses import action_response, json_body
from gym_backoffice.services.inventory.reorder_search_service import ReorderFilters, ReorderSearchService
from gym_backoffice.services.inventory.reorder_stats_service import ReorderStatsService


def register_reorder_routes(inventory_bp):
    """Register all reorder request routes to the inventory blueprint"""

    @inventory_bp.route('/reorders', methods=['POST'])
    def create_reorder():
        data = json_body()
        result = ReorderRequestManager.create_request(
            product_id=data.get('product_id'),
            location_id=data.get('location_id'),
            quantity=data.get('quantity'),
            notes=data.get('notes'),
            requested_by=data.get('requested_by'),
            vendor_id=data.get('vendor_id'),
        )
        return action_response(
            f"Reorder request {result.entity.request_number} created successfully",
            'request', result, status_code=201
        )

    @inventory_bp.route('/reorders', methods=['GET'])
    def list_reorders():
        filters = ReorderFilters.from_args(request.args)
        return jsonify({'requests': ReorderSearchService.list_requests(filters)})

    @inventory_bp.route('/reorders/<int:request_id>', methods=['GET'])
    def get_reorder(request_id):
        return jsonify(ReorderSearchService.get_request(request_id))

    @inventory_bp.route('/reorders/<int:request_id>/approve', methods=['PUT'])
    def approve_reorder(request_id):
        data = json_body()
        result = ReorderRequestManager.approve_request(request_id, data.get('approved_by'))
        return action_response("Reorder request approved successfully", 'request', result)

    @inventory_bp.route('/reorders/<int:request_id>/reject', methods=['PUT'])
    def reject_reorder(request_id):
        data = json_body()
        result = ReorderRequestManager.reject_request(
            request_id,
            rejected_by=data.get('rejected_by'),
            reason=data.get('rejection_reason'),
        )
        return action_response("Reorder request rejected", 'request', result)

    @inventory_bp.route('/reorders/<int:request_id>/receive', methods=['PUT'])
    def receive_reorder(request_id):
        data = json_body()
        result = ReorderRequestManager.receive_request(request_id, data.get('quantity_received'))
        return action_response("Reorder marked as received and inventory updated", 'request', result)

    # Stats and charts
    @inventory_bp.route('/reorders/stats', methods=['GET'])
    def reorder_stats():
        return jsonify(ReorderStatsService.get_stats())

    @inventory_bp.route('/reorders/chart/status-breakdown', methods=['GET'])
    def reorder_status_breakdown():
        return jsonify(ReorderStatsService.get_status_breakdown())

    @inventory_bp.route('/reorders/chart/trends', methods=['GET'])
    def reorder_trends():
        return jsonify(ReorderStatsService.get_trends())
