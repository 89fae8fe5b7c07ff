from flask import jsonify

from api.services import get_ranking_calculator
from utils.decorators import handle_db_errors

from . import rankings_bp


@rankings_bp.route('/events', methods=['GET'])
@handle_db_errors
def get_scored_events():
    """获取已有评分的赛事（排名范围选择）"""
    events = get_ranking_calculator().get_scored_events()
    return jsonify({
        'success': True,
        'events': events,
        'count': len(events),
    })
