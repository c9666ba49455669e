"""
Product catalog, reference data and inventory dashboard routes
"""
from flask import jsonify, request

from gym_backoffice.buisness.inventory.catalog.product_manager import ProductManager
from gym_backoffice.presentation.routes.inventory.responses import action_response, json_body
from gym_backoffice.services.inventory.catalog_view_service import CatalogViewService


def register_catalog_routes(inventory_bp):
    """Register product, category, location and inventory stats routes"""

    @inventory_bp.route('/products', methods=['GET'])
    def list_products():
        return jsonify({'products': CatalogViewService.list_products(request.args)})

    @inventory_bp.route('/products/<int:product_id>', methods=['GET'])
    def get_product(product_id):
        return jsonify(CatalogViewService.get_product(product_id))

    @inventory_bp.route('/products', methods=['POST'])
    def create_product():
        result = ProductManager.create_product(json_body())
        return action_response(
            f"Product {result.entity.sku} created successfully", 'product', result, status_code=201
        )

    @inventory_bp.route('/products/<int:product_id>', methods=['PUT'])
    def update_product(product_id):
        result = ProductManager.update_product(product_id, json_body())
        return action_response("Product updated successfully", 'product', result)

    @inventory_bp.route('/products/<int:product_id>', methods=['DELETE'])
    def deactivate_product(product_id):
        result = ProductManager.deactivate_product(product_id)
        return action_response("Product deactivated successfully", 'product', result)

    # Reference data
    @inventory_bp.route('/categories', methods=['GET'])
    def list_categories():
        return jsonify(CatalogViewService.list_categories())

    @inventory_bp.route('/locations', methods=['GET'])
    def list_locations():
        include_inactive = request.args.get('include_inactive', '').lower() in ('true', '1', 'yes')
        return jsonify(CatalogViewService.list_locations(include_inactive=include_inactive))

    # Dashboard
    @inventory_bp.route('/stats', methods=['GET'])
    def inventory_stats():
        return jsonify(CatalogViewService.get_stats())

    @inventory_bp.route('/chart/stock-health', methods=['GET'])
    def stock_health_chart():
        return jsonify(CatalogViewService.get_stock_health())

    @inventory_bp.route('/chart/stock-by-category', methods=['GET'])
    def stock_by_category_chart():
        return jsonify(CatalogViewService.get_stock_by_category())
