from flask import jsonify

from api.services import get_score_service
from core.medals import classify_percentage
from utils.decorators import handle_db_errors

from . import scoring_bp


@scoring_bp.route('/performance/<performance_id>', methods=['GET'])
@handle_db_errors
def get_performance_scores(performance_id):
    """获取表演的全部评分与汇总结果"""
    performance, scores, result = get_score_service().get_performance_result(performance_id)

    summary = None
    if result is not None:
        summary = result.to_dict()
        summary['medal'] = classify_percentage(result.percentage).to_dict()

    return jsonify({
        'success': True,
        'performance': performance.to_dict(),
        'scores': [score.to_dict() for score in scores],
        'summary': summary,
    })
