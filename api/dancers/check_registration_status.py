from flask import request, jsonify

from api.services import get_registration_tracker
from utils.decorators import validate_json, handle_db_errors
from utils.helpers import parse_id_list

from . import dancers_bp


@dancers_bp.route('/registration-status', methods=['POST'])
@validate_json(['dancerIds'])
@handle_db_errors
def check_registration_status():
    """批量查询报名费状态；提供 masteryLevel 时同时返回该组别下的缴费分析"""
    data = request.get_json()
    dancer_ids = parse_id_list(data['dancerIds'])
    tracker = get_registration_tracker()

    response = {
        'success': True,
        'records': [record.to_dict() for record in tracker.get_status_for_many(dancer_ids)],
    }
    if data.get('masteryLevel'):
        response['analysis'] = tracker.check_group_status(dancer_ids, data['masteryLevel'])

    return jsonify(response)
