from flask import request, jsonify

from api.services import get_ranking_calculator
from core.rankings import RankingFilters, normalize_group_by
from utils.decorators import handle_db_errors

from . import rankings_bp


def filters_from_request():
    return RankingFilters.from_mapping(request.args)


@rankings_bp.route('', methods=['GET'])
@handle_db_errors
def get_rankings():
    """获取排名

    查询参数: eventIds, ageCategory, performanceType, region, itemStyle, groupBy
    """
    filters = filters_from_request()
    group_by = normalize_group_by(request.args.get('groupBy'))
    rows = get_ranking_calculator().get_rankings(filters, group_by=group_by)

    return jsonify({
        'success': True,
        'rankings': [row.to_dict() for row in rows],
        'count': len(rows),
        'filters': filters.to_dict(),
        'group_by': list(group_by),
    })
