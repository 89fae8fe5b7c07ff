from flask import jsonify, current_app

from core.medals import ALL_TIERS, MEDAL_THRESHOLDS

from . import scoring_bp


@scoring_bp.route('/config', methods=['GET'])
def get_scoring_config():
    """获取评分配置与奖牌等级分数线"""
    scoring_config = current_app.config.get('SCORING_CONFIG', {})
    thresholds = {tier.type: threshold for threshold, tier in MEDAL_THRESHOLDS}

    return jsonify({
        'success': True,
        'config': scoring_config,
        'medal_tiers': [
            dict(tier.to_dict(), min_percentage=thresholds.get(tier.type, 0))
            for tier in ALL_TIERS
        ],
    })
