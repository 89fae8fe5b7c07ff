from flask import request, jsonify

from api.services import get_registration_tracker
from utils.decorators import validate_json, log_action, handle_db_errors

from . import dancers_bp


@dancers_bp.route('/<dancer_id>/registration-fee', methods=['POST'])
@validate_json(['masteryLevel'])
@log_action('标记报名费已缴')
@handle_db_errors
def mark_registration_paid(dancer_id):
    """管理员标记舞者报名费已缴"""
    data = request.get_json()
    record = get_registration_tracker().mark_paid(dancer_id, data['masteryLevel'])

    return jsonify({
        'success': True,
        'message': 'Registration fee marked as paid',
        'record': record.to_dict()
    })
