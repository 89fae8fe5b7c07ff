import json
import logging

from mysql.connector import Error

from models import Performance


logger = logging.getLogger(__name__)


_PERFORMANCE_SELECT = """
    SELECT p.performance_id, p.event_id, p.title, p.participant_ids, p.participant_names,
           p.contestant_name, p.contestant_type, p.studio_name, p.choreographer, p.mastery,
           p.item_style, p.item_number, p.withdrawn_from_judging,
           e.name AS event_name, e.region, e.age_category, e.performance_type
    FROM performances p
    JOIN events e ON p.event_id = e.event_id
"""


def parse_json_list(raw, field_name=None):
    """解析 JSON 数组列；解析失败返回空列表"""
    if raw is None or raw == '':
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"解析 {field_name or 'JSON'} 失败: {e}")
        return []
    return list(value) if isinstance(value, list) else []


def row_to_performance(row):
    return Performance(
        performance_id=row['performance_id'],
        event_id=row['event_id'],
        title=row.get('title'),
        participant_ids=[str(p) for p in parse_json_list(row.get('participant_ids'), 'participant_ids')],
        participant_names=parse_json_list(row.get('participant_names'), 'participant_names'),
        contestant_name=row.get('contestant_name'),
        contestant_type=row.get('contestant_type'),
        studio_name=row.get('studio_name'),
        choreographer=row.get('choreographer'),
        mastery=row.get('mastery'),
        item_style=row.get('item_style'),
        item_number=row.get('item_number'),
        withdrawn_from_judging=bool(row.get('withdrawn_from_judging')),
        event_name=row.get('event_name'),
        region=row.get('region'),
        age_category=row.get('age_category'),
        performance_type=row.get('performance_type'),
    )


def build_candidate_query(filters):
    """根据已设置的筛选条件拼接 WHERE（值全部参数化）"""
    conditions = []
    params = []

    if filters.event_ids:
        placeholders = ', '.join(['%s'] * len(filters.event_ids))
        conditions.append(f"p.event_id IN ({placeholders})")
        params.extend(filters.event_ids)
    if filters.region is not None:
        conditions.append("e.region = %s")
        params.append(filters.region)
    if filters.age_category is not None:
        conditions.append("e.age_category = %s")
        params.append(filters.age_category)
    if filters.performance_type is not None:
        conditions.append("e.performance_type = %s")
        params.append(filters.performance_type)
    if filters.item_style is not None:
        conditions.append("p.item_style = %s")
        params.append(filters.item_style)

    # 退出评分的表演在汇总前直接排除
    conditions.append("COALESCE(p.withdrawn_from_judging, FALSE) = FALSE")

    query = _PERFORMANCE_SELECT + " WHERE " + " AND ".join(conditions)
    query += " ORDER BY e.region, e.age_category, e.performance_type, p.performance_id"
    return query, tuple(params)


_EVENTS_WITH_SCORES_QUERY = """
    SELECT e.event_id, e.name, e.region, e.age_category, e.performance_type,
           e.event_date, e.venue,
           COUNT(DISTINCT p.performance_id) AS performance_count,
           COUNT(DISTINCT s.score_id) AS score_count
    FROM events e
    JOIN performances p ON e.event_id = p.event_id
    LEFT JOIN scores s ON p.performance_id = s.performance_id
    GROUP BY e.event_id, e.name, e.region, e.age_category, e.performance_type,
             e.event_date, e.venue
    HAVING COUNT(DISTINCT s.score_id) > 0
    ORDER BY e.event_date DESC, e.name
"""


def row_to_scored_event(row):
    event_date = row.get('event_date')
    return {
        'event_id': row['event_id'],
        'name': row.get('name'),
        'region': row.get('region'),
        'age_category': row.get('age_category'),
        'performance_type': row.get('performance_type'),
        'event_date': event_date.isoformat() if hasattr(event_date, 'isoformat') else event_date,
        'venue': row.get('venue'),
        'performance_count': int(row.get('performance_count') or 0),
        'score_count': int(row.get('score_count') or 0),
    }


class PerformanceDbMixin:
    """表演相关数据库操作 mixin。

    依赖宿主类提供:
    - self.get_connection(): 返回数据库连接的上下文管理器
    """

    def get_performance_by_id(self, performance_id):
        """根据ID获取表演（含所属赛事的分类信息）"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    _PERFORMANCE_SELECT + " WHERE p.performance_id = %s",
                    (performance_id,),
                )
                row = cursor.fetchone()
                return row_to_performance(row) if row else None

        except Error as e:
            logger.error(f"获取表演失败: {e}")
            raise

    def get_ranking_candidates(self, filters):
        """获取满足筛选条件、仍参与评分的表演"""
        query, params = build_candidate_query(filters)
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(query, params)
                return [row_to_performance(row) for row in cursor.fetchall()]

        except Error as e:
            logger.error(f"获取排名候选表演失败: {e}")
            raise

    def update_performance(self, performance_id, patch):
        """按 PerformancePatch 中已设置的字段执行一次参数化 UPDATE"""
        fields = patch.fields()
        if not fields:
            return False

        assignments = ', '.join(f"{column} = %s" for column, _ in fields)
        params = tuple(value for _, value in fields) + (performance_id,)
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"UPDATE performances SET {assignments} WHERE performance_id = %s",
                    params,
                )
                conn.commit()
                return cursor.rowcount > 0

        except Error as e:
            logger.error(f"更新表演失败: {e}")
            raise

    def get_events_with_scores(self):
        """获取至少有一条评分的赛事，附带表演数与评分数（排名页的赛事选择列表）"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(_EVENTS_WITH_SCORES_QUERY)
                return [row_to_scored_event(row) for row in cursor.fetchall()]

        except Error as e:
            logger.error(f"获取已评分赛事失败: {e}")
            raise
