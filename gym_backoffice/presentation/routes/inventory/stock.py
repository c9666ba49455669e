"""
Direct stock adjustment route
"""
from gym_backoffice.buisness.inventory.stock.stock_manager import StockManager
from gym_backoffice.presentation.routes.inventory.responses import action_response, json_body


def register_stock_routes(inventory_bp):

    @inventory_bp.route('/stock/<int:product_id>/<int:location_id>', methods=['PUT'])
    def adjust_stock(product_id, location_id):
        data = json_body()
        result = StockManager.adjust_stock(
            product_id,
            location_id,
            data.get('quantity'),
            adjustment_type=data.get('adjustment_type'),
            reason=data.get('adjustment_reason'),
            adjusted_by=data.get('adjusted_by'),
        )
        return action_response("Stock updated successfully", 'stock', result)
