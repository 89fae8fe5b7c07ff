"""
评分汇总

每位裁判总分 = 五项分数之和（0-100）；表演总分为所有裁判总分之和，
百分比 = 总分 / (裁判数 * 100) * 100。
"""

import logging
import math
from decimal import Decimal

from models import AggregatedResult

logger = logging.getLogger(__name__)


def _criterion_value(value):
    """返回可用的分数值；负数、NaN、非数字返回 None"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    value = float(value)
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value


def valid_judge_total(score):
    """校验一条评分并返回裁判总分，不可用时返回 None"""
    values = [_criterion_value(v) for v in score.criteria()]
    if any(v is None for v in values):
        return None
    return sum(values)


def aggregate_scores(performance_id, scores, withdrawn_from_judging=False):
    """汇总一个表演的全部评分。

    Args:
        performance_id: 表演ID
        scores: 该表演的 Score 列表
        withdrawn_from_judging: 表演已退出评分时直接返回 None（在汇总之前判断）

    Returns:
        AggregatedResult，或在没有有效评分时返回 None
    """
    if withdrawn_from_judging:
        return None

    totals = []
    for score in scores or []:
        if score.performance_id is not None and score.performance_id != performance_id:
            logger.warning(
                f"评分 {score.score_id} 属于表演 {score.performance_id}，不计入表演 {performance_id}"
            )
            continue
        judge_total = valid_judge_total(score)
        if judge_total is None:
            logger.warning(
                f"忽略无效评分: 表演 {performance_id}, 裁判 {score.judge_id}, 分数 {score.criteria()}"
            )
            continue
        totals.append(judge_total)

    judge_count = len(totals)
    if judge_count == 0:
        return None

    # 分数为两位小数，避免浮点误差把同分判为不同分
    total_score = round(sum(totals), 2)
    max_possible = judge_count * 100
    percentage = (total_score / max_possible) * 100 if max_possible > 0 else 0

    return AggregatedResult(
        performance_id=performance_id,
        total_score=total_score,
        average_score=total_score / judge_count,
        judge_count=judge_count,
        percentage=percentage,
    )


def aggregate_performance(performance, scores):
    """按 Performance 对象汇总（退出评分的表演不参与）"""
    return aggregate_scores(
        performance.performance_id,
        scores,
        withdrawn_from_judging=performance.withdrawn_from_judging,
    )
