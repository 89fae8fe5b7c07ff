"""
评分提交与表演评分状态管理
"""

import logging
import math
from decimal import Decimal

from config import Config
from core.aggregator import aggregate_performance
from core.errors import InputValidationError, NotFoundError
from models import PerformancePatch, Score

logger = logging.getLogger(__name__)

CRITERIA = tuple(Config.SCORING_CONFIG['criteria'])

# 前端/旧接口使用的字段名
CRITERION_ALIASES = {
    'technique': 'technical',
    'technical_score': 'technical',
    'musicality': 'musical',
    'musical_score': 'musical',
    'performance_score': 'performance',
    'styling_score': 'styling',
    'overallImpression': 'overall_impression',
    'overall_impression_score': 'overall_impression',
}


def _to_number(name, value):
    if isinstance(value, bool) or value is None:
        raise InputValidationError(f'{name} score must be a number')
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InputValidationError(f'{name} score must be a number, got {value!r}')
    else:
        raise InputValidationError(f'{name} score must be a number')
    if math.isnan(number) or math.isinf(number):
        raise InputValidationError(f'{name} score must be a finite number')
    return number


def validate_criteria(criterion_scores, minimum=None, maximum=None):
    """校验五项分数，返回按固定顺序排列的 float 列表。

    criterion_scores 可以是长度为 5 的序列，也可以是以评分项为键的字典。
    """
    minimum = Config.SCORING_CONFIG['criterion_min'] if minimum is None else minimum
    maximum = Config.SCORING_CONFIG['criterion_max'] if maximum is None else maximum

    if isinstance(criterion_scores, dict):
        normalized = {}
        for key, value in criterion_scores.items():
            normalized[CRITERION_ALIASES.get(key, key)] = value
        missing = [c for c in CRITERIA if c not in normalized]
        if missing:
            raise InputValidationError(f"Missing criterion scores: {', '.join(missing)}")
        raw = [normalized[c] for c in CRITERIA]
    elif isinstance(criterion_scores, (list, tuple)):
        if len(criterion_scores) != len(CRITERIA):
            raise InputValidationError(
                f'Expected {len(CRITERIA)} criterion scores, got {len(criterion_scores)}'
            )
        raw = list(criterion_scores)
    else:
        raise InputValidationError('Criterion scores must be a list or a mapping')

    values = []
    for name, value in zip(CRITERIA, raw):
        number = _to_number(name, value)
        if not (minimum <= number <= maximum):
            raise InputValidationError(f'{name} score must be between {minimum:g} and {maximum:g}')
        values.append(number)
    return values


class ScoreService:
    """裁判评分服务。

    store 需要提供:
    - get_performance_by_id(performance_id)
    - get_scores_by_performance(performance_id)
    - upsert_score(score): 按 (judge_id, performance_id) 插入或覆盖
    - delete_score(performance_id, judge_id)
    - update_performance(performance_id, patch)
    """

    def __init__(self, store):
        self.store = store

    def _require_performance(self, performance_id):
        performance = self.store.get_performance_by_id(performance_id)
        if performance is None:
            raise NotFoundError(f'Performance {performance_id} not found')
        return performance

    def submit_score(self, judge_id, performance_id, criterion_scores, comments=''):
        """提交评分；同一裁判重复提交时覆盖原评分，不会产生第二条记录"""
        if judge_id is None or str(judge_id).strip() == '':
            raise InputValidationError('Judge id is required')
        if performance_id is None or str(performance_id).strip() == '':
            raise InputValidationError('Performance id is required')

        values = validate_criteria(criterion_scores)
        self._require_performance(performance_id)

        score = Score(
            judge_id=str(judge_id).strip(),
            performance_id=str(performance_id).strip(),
            technical_score=values[0],
            musical_score=values[1],
            performance_score=values[2],
            styling_score=values[3],
            overall_impression_score=values[4],
            comments=(comments or '').strip(),
        )
        saved = self.store.upsert_score(score)
        logger.info(f"裁判 {score.judge_id} 为表演 {score.performance_id} 提交评分: {score.judge_total()}")
        return saved

    def remove_score(self, performance_id, judge_id):
        """管理员删除某位裁判的评分"""
        removed = self.store.delete_score(performance_id, judge_id)
        if not removed:
            raise NotFoundError(f'No score from judge {judge_id} for performance {performance_id}')
        logger.info(f"已删除裁判 {judge_id} 对表演 {performance_id} 的评分")
        return True

    def get_performance_result(self, performance_id):
        """返回表演、评分列表和汇总结果（无有效评分或已退出评分时汇总为 None）"""
        performance = self._require_performance(performance_id)
        scores = self.store.get_scores_by_performance(performance_id)
        return performance, scores, aggregate_performance(performance, scores)

    def _patch(self, performance_id, patch):
        self._require_performance(performance_id)
        self.store.update_performance(performance_id, patch)

    def withdraw_performance(self, performance_id):
        self._patch(performance_id, PerformancePatch(withdrawn_from_judging=True))
        logger.info(f"表演 {performance_id} 已退出评分")

    def restore_performance(self, performance_id):
        self._patch(performance_id, PerformancePatch(withdrawn_from_judging=False))
        logger.info(f"表演 {performance_id} 已恢复评分")

    def assign_item_number(self, performance_id, item_number):
        """分配出场编号"""
        if isinstance(item_number, bool):
            raise InputValidationError('Item number must be a positive whole number')
        try:
            number = int(item_number)
        except (TypeError, ValueError):
            raise InputValidationError('Item number must be a positive whole number')
        if number < 1 or str(number) != str(item_number).strip():
            raise InputValidationError('Item number must be a positive whole number')
        self._patch(performance_id, PerformancePatch(item_number=number))
        logger.info(f"表演 {performance_id} 出场编号设为 {number}")
        return number
