from flask import request, jsonify

from api.services import get_score_service
from utils.decorators import validate_json, log_action, handle_db_errors

from . import scoring_bp, logger


def _field(data, *names):
    for name in names:
        if name in data:
            return data[name]
    return None


@scoring_bp.route('', methods=['POST'])
@validate_json(['performanceId', 'judgeId'])
@log_action('提交评分')
@handle_db_errors
def submit_score():
    """提交评分

    五项分数可以放在 scores 中（长度为 5 的数组或以评分项为键的对象），
    也可以直接作为请求体的字段。
    """
    data = request.get_json()
    criterion_scores = data.get('scores', data)

    score = get_score_service().submit_score(
        judge_id=data['judgeId'],
        performance_id=data['performanceId'],
        criterion_scores=criterion_scores,
        comments=_field(data, 'comments', 'notes') or '',
    )

    logger.info(f"评分已保存: 表演 {score.performance_id}, 裁判 {score.judge_id}")

    return jsonify({
        'success': True,
        'message': 'Score submitted',
        'score': score.to_dict()
    })
