"""
排名计算

两种模式:
- 全局模式（不分组）：筛选后的全部表演按总分降序统一排名；
- 分组模式：按组合键（如 地区+年龄组+表演类型）分桶，每个桶内独立从 1 开始排名。

名次只按总分比较。同分同名次，下一个更低的分数取其在列表中的位置（从 1 开始），
即 [100, 100, 90] -> [1, 1, 3]。
"""

import logging

from mysql.connector import Error

from config import Config
from core.aggregator import aggregate_performance
from core.errors import InputValidationError, RankingComputationError
from core.medals import classify_percentage
from models import RankingRow

logger = logging.getLogger(__name__)

UNKNOWN_PARTICIPANT = 'Unknown Participant'

# 分组参数别名 -> 字段名（同时接受前端的 camelCase 写法）；可用字段由 RANKING_CONFIG 决定
GROUP_BY_FIELDS = {
    'event_id': 'event_id',
    'eventId': 'event_id',
    'region': 'region',
    'age_category': 'age_category',
    'ageCategory': 'age_category',
    'performance_type': 'performance_type',
    'performanceType': 'performance_type',
    'item_style': 'item_style',
    'itemStyle': 'item_style',
    'style': 'item_style',
}

# 默认的分类排名组合键
CATEGORY_KEY = ('region', 'age_category', 'performance_type')

# 表示“不过滤”的取值
_NO_FILTER_VALUES = ('', 'all')


def _clean_filter_value(value):
    if value is None or isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    text = str(value).strip()
    if text.lower() in _NO_FILTER_VALUES:
        return None
    return text


def _clean_event_ids(value):
    if value is None:
        return []
    if isinstance(value, (str, int)):
        items = str(value).split(',')
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        return []
    event_ids = []
    for item in items:
        cleaned = _clean_filter_value(item)
        if cleaned and cleaned not in event_ids:
            event_ids.append(cleaned)
    return event_ids


class RankingFilters:
    """排名筛选条件，所有条件之间为 AND 关系，未设置的条件不参与过滤"""

    FIELDS = ('region', 'age_category', 'performance_type', 'item_style')

    # 输入键 -> 属性名
    KEY_ALIASES = {
        'event_ids': 'event_ids',
        'eventIds': 'event_ids',
        'event_id': 'event_ids',
        'eventId': 'event_ids',
        'region': 'region',
        'age_category': 'age_category',
        'ageCategory': 'age_category',
        'performance_type': 'performance_type',
        'performanceType': 'performance_type',
        'item_style': 'item_style',
        'itemStyle': 'item_style',
    }

    def __init__(self, event_ids=None, age_category=None, performance_type=None,
                 region=None, item_style=None):
        self.event_ids = _clean_event_ids(event_ids)
        self.age_category = _clean_filter_value(age_category)
        self.performance_type = _clean_filter_value(performance_type)
        self.region = _clean_filter_value(region)
        self.item_style = _clean_filter_value(item_style)

    @classmethod
    def from_mapping(cls, data):
        """从请求参数构造；格式不对的输入退化为“不过滤”，不报错"""
        if isinstance(data, cls):
            return data
        if not hasattr(data, 'items'):
            return cls()
        kwargs = {}
        for key, value in data.items():
            attr = cls.KEY_ALIASES.get(key)
            if attr and attr not in kwargs:
                kwargs[attr] = value
        return cls(**kwargs)

    def is_empty(self):
        return not self.event_ids and all(getattr(self, f) is None for f in self.FIELDS)

    def matches(self, performance):
        if self.event_ids and str(performance.event_id) not in self.event_ids:
            return False
        for field in self.FIELDS:
            expected = getattr(self, field)
            if expected is not None and str(getattr(performance, field)) != expected:
                return False
        return True

    def to_dict(self):
        return {
            'event_ids': list(self.event_ids),
            'region': self.region,
            'age_category': self.age_category,
            'performance_type': self.performance_type,
            'item_style': self.item_style,
        }


def resolve_contestant_name(participant_names, contestant_name=None):
    """排名中显示的参赛者名称。

    优先级:
    1. 已知的参赛舞者姓名，用 ", " 连接（双人舞/三人舞/群舞按舞者署名）；
    2. 没有任何可用舞者姓名时，使用报名时记录的参赛者名称；
    3. 都没有时返回 "Unknown Participant"。
    """
    names = [str(n).strip() for n in (participant_names or []) if n is not None and str(n).strip()]
    if names:
        return ', '.join(names)
    if contestant_name and str(contestant_name).strip():
        return str(contestant_name).strip()
    return UNKNOWN_PARTICIPANT


def normalize_group_by(group_by):
    """把分组参数规范为字段名元组；空值表示全局模式"""
    if not group_by:
        return ()
    if isinstance(group_by, str):
        items = [g.strip() for g in group_by.split(',') if g.strip()]
    else:
        items = list(group_by)

    allowed = Config.RANKING_CONFIG['group_by_fields']
    fields = []
    for item in items:
        field = GROUP_BY_FIELDS.get(item)
        if field is None or field not in allowed:
            raise InputValidationError(f'Cannot group rankings by {item!r}')
        if field not in fields:
            fields.append(field)
    return tuple(fields)


def sort_by_total_score(rows):
    """按总分降序；同分按表演ID排序，保证多次调用顺序一致"""
    return sorted(rows, key=lambda r: (-r.total_score, str(r.performance_id)))


def assign_dense_ranks(sorted_rows):
    """按总分为已排序的行分配名次（同分同名次，之后的名次跳到当前位置）"""
    current_rank = 1
    for i, row in enumerate(sorted_rows):
        if i > 0 and row.total_score < sorted_rows[i - 1].total_score:
            current_rank = i + 1
        row.rank = current_rank
    return sorted_rows


def _bucket_sort_key(key):
    return tuple('' if part is None else str(part) for part in key)


class RankingCalculator:
    """排名计算器。

    store 需要提供:
    - get_ranking_candidates(filters): 返回满足筛选条件的 Performance 列表
    - get_scores_for_performances(performance_ids): 返回 {performance_id: [Score, ...]}
    - get_events_with_scores(): 返回有评分的赛事摘要列表
    """

    def __init__(self, store):
        self.store = store

    def _load(self, filters):
        try:
            performances = self.store.get_ranking_candidates(filters)
            performances = [p for p in performances if filters.matches(p)]
            scores = self.store.get_scores_for_performances(
                [p.performance_id for p in performances]
            ) if performances else {}
        except Error as e:
            logger.error(f"排名计算失败（存储层错误）: {e}")
            raise RankingComputationError('Ranking computation failed') from e
        return performances, scores

    def build_rows(self, performances, scores_by_performance):
        """汇总评分并生成未排名的行；没有有效评分或已退出评分的表演不出现在结果中"""
        rows = []
        for performance in performances:
            result = aggregate_performance(
                performance, scores_by_performance.get(performance.performance_id, [])
            )
            if result is None or result.judge_count == 0:
                continue
            rows.append(RankingRow(
                performance=performance,
                result=result,
                contestant_name=resolve_contestant_name(
                    performance.participant_names, performance.contestant_name
                ),
                medal=classify_percentage(result.percentage),
            ))
        return rows

    def rank_rows(self, rows, group_by=()):
        if not group_by:
            return assign_dense_ranks(sort_by_total_score(rows))

        buckets = {}
        for row in rows:
            key = tuple(getattr(row, field) for field in group_by)
            buckets.setdefault(key, []).append(row)

        ranked = []
        for key in sorted(buckets, key=_bucket_sort_key):
            ranked.extend(assign_dense_ranks(sort_by_total_score(buckets[key])))
        return ranked

    def get_rankings(self, filters=None, group_by=None):
        """计算排名，返回按（分组键、名次）排列的 RankingRow 列表。

        Args:
            filters: RankingFilters 或 dict，None 表示不过滤
            group_by: 分组字段（列表或逗号分隔字符串），为空时使用全局模式

        Raises:
            InputValidationError: 分组字段不支持
            RankingComputationError: 存储层失败（与“没有结果”区分）
        """
        filters = RankingFilters.from_mapping(filters) if filters is not None else RankingFilters()
        fields = normalize_group_by(group_by)

        performances, scores = self._load(filters)
        rows = self.rank_rows(self.build_rows(performances, scores), fields)

        logger.info(
            f"排名计算完成: 筛选 {filters.to_dict()}, 分组 {list(fields) or '全局'}, 共 {len(rows)} 条"
        )
        return rows

    def get_category_rankings(self, filters=None):
        """按 地区+年龄组+表演类型 分类排名"""
        return self.get_rankings(filters, group_by=CATEGORY_KEY)

    def get_scored_events(self):
        """至少有一条评分的赛事列表，用于选择排名范围"""
        try:
            return self.store.get_events_with_scores()
        except Error as e:
            logger.error(f"获取已评分赛事失败（存储层错误）: {e}")
            raise RankingComputationError('Could not load events with scores') from e
