from flask import request, jsonify

from api.services import get_registration_tracker
from utils.decorators import validate_json, log_action, handle_db_errors
from utils.helpers import parse_id_list

from . import dancers_bp, logger


@dancers_bp.route('/registration-fee/mark-paid', methods=['POST'])
@validate_json(['dancerIds', 'masteryLevel'])
@log_action('批量标记报名费已缴')
@handle_db_errors
def mark_group_registration_paid():
    """为一组舞者标记报名费已缴，返回逐个结果"""
    data = request.get_json()
    results = get_registration_tracker().mark_group_paid(
        parse_id_list(data['dancerIds']), data['masteryLevel']
    )
    failed = [r for r in results if not r['success']]
    if failed:
        logger.warning(f"批量标记报名费: {len(failed)}/{len(results)} 个舞者失败")

    return jsonify({
        'success': not failed,
        'results': results,
    })
