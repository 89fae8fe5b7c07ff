from flask import request, jsonify

from api.services import get_score_service
from utils.decorators import validate_json, log_action, handle_db_errors

from . import performances_bp


@performances_bp.route('/<performance_id>', methods=['PATCH'])
@validate_json(['itemNumber'])
@log_action('分配出场编号')
@handle_db_errors
def update_performance(performance_id):
    """分配出场编号"""
    item_number = get_score_service().assign_item_number(
        performance_id, request.get_json()['itemNumber']
    )
    return jsonify({
        'success': True,
        'performance_id': performance_id,
        'item_number': item_number
    })
