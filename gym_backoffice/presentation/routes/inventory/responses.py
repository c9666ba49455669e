"""
JSON body helpers shared by the inventory routes
"""
from flask import jsonify, request

from gym_backoffice.buisness.inventory.exceptions import ValidationError


def json_body():
    """Request body as a dict; an absent body reads as empty"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def action_response(message, key, result, status_code=200):
    """Success envelope for an ActionResult: success flag, message, entity and warnings"""
    body = {
        'success': True,
        'message': message,
        key: result.entity.to_dict(),
    }
    if result.has_warnings:
        body['warnings'] = result.warnings
    return jsonify(body), status_code
