from flask import request, jsonify

from api.services import get_fee_calculator
from utils.decorators import validate_json, handle_db_errors
from utils.helpers import parse_id_list

from . import fees_bp


@fees_bp.route('/calculate', methods=['POST'])
@validate_json(['performanceType', 'masteryLevel', 'participantIds'])
@handle_db_errors
def calculate_fee():
    """报名费用报价（只读，不修改报名费状态）"""
    data = request.get_json()

    fee = get_fee_calculator().compute_fee(
        performance_type=data['performanceType'],
        mastery_level=data['masteryLevel'],
        participant_ids=parse_id_list(data['participantIds']),
        solo_count=data.get('soloCount'),
    )

    return jsonify({
        'success': True,
        'fee': fee.to_dict()
    })
