from flask import jsonify

from api.services import get_score_service
from utils.decorators import log_action, handle_db_errors

from . import scoring_bp


@scoring_bp.route('/<performance_id>/<judge_id>', methods=['DELETE'])
@log_action('删除评分')
@handle_db_errors
def remove_score(performance_id, judge_id):
    """删除某位裁判对某表演的评分"""
    get_score_service().remove_score(performance_id, judge_id)
    return jsonify({
        'success': True,
        'message': 'Score removed'
    })
