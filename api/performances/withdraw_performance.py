from flask import request, jsonify

from api.services import get_score_service
from utils.decorators import validate_json, log_action, handle_db_errors

from . import performances_bp


@performances_bp.route('/<performance_id>/withdraw', methods=['POST'])
@validate_json(['action'])
@log_action('表演退出/恢复评分')
@handle_db_errors
def withdraw_performance(performance_id):
    """action 为 withdraw 时退出评分，为 restore 时恢复"""
    action = str(request.get_json()['action']).strip().lower()
    service = get_score_service()

    if action == 'withdraw':
        service.withdraw_performance(performance_id)
        message = 'Performance withdrawn from judging'
    elif action == 'restore':
        service.restore_performance(performance_id)
        message = 'Performance restored to judging'
    else:
        return jsonify({
            'success': False,
            'message': "Action must be 'withdraw' or 'restore'",
            'code': 400
        }), 400

    return jsonify({
        'success': True,
        'message': message,
        'withdrawn_from_judging': action == 'withdraw'
    })
