from flask import jsonify

from api.services import get_registration_tracker
from utils.decorators import log_action, handle_db_errors

from . import dancers_bp


@dancers_bp.route('/<dancer_id>/registration-fee', methods=['DELETE'])
@log_action('标记报名费未缴')
@handle_db_errors
def mark_registration_unpaid(dancer_id):
    """管理员清除舞者报名费状态"""
    record = get_registration_tracker().mark_unpaid(dancer_id)

    return jsonify({
        'success': True,
        'message': 'Registration fee marked as unpaid',
        'record': record.to_dict()
    })
