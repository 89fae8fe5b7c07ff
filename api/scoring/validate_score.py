from flask import request, jsonify

from core.errors import InputValidationError
from core.scores import validate_criteria
from utils.decorators import validate_json
from utils.helpers import format_score

from . import scoring_bp


@scoring_bp.route('/validate', methods=['POST'])
@validate_json()
def validate_score():
    """验证评分数据（不保存）"""
    data = request.get_json()

    try:
        values = validate_criteria(data.get('scores', data))
    except InputValidationError as e:
        return jsonify({
            'success': False,
            'errors': [str(e)]
        }), 400

    total_score = sum(values)
    return jsonify({
        'success': True,
        'errors': [],
        'total_score': total_score,
        'formatted_total': format_score(total_score)
    })
