"""
参赛费用计算

calculate_fee 是纯函数：相同的输入（包括相同的报名费状态快照）总是得到相同的费用明细，
不会修改任何报名费记录。FeeCalculator 负责从状态表读取快照后调用它。
"""

import logging

from core import fee_rules
from core.errors import InputValidationError
from models import FeeBreakdown, MasteryLevel, PerformanceType

logger = logging.getLogger(__name__)


def _plural(count, word):
    return f"{count} {word}{'s' if count != 1 else ''}"


def _normalize_participants(participant_ids):
    if participant_ids is None or isinstance(participant_ids, (str, bytes)):
        raise InputValidationError('participant_ids must be a list of dancer ids')
    ids = [str(p).strip() for p in participant_ids if p is not None and str(p).strip()]
    if len(ids) < 1:
        raise InputValidationError('At least one participant is required')
    if len(set(ids)) != len(ids):
        raise InputValidationError('Duplicate participant ids in roster')
    return ids


def _normalize_solo_count(solo_count):
    if solo_count is None:
        return 1
    if isinstance(solo_count, float) and solo_count.is_integer():
        solo_count = int(solo_count)
    elif isinstance(solo_count, str) and solo_count.strip().isdigit():
        solo_count = int(solo_count.strip())
    if isinstance(solo_count, bool) or not isinstance(solo_count, int):
        raise InputValidationError(f'Solo count must be a whole number, got {solo_count!r}')
    if solo_count < 1:
        raise InputValidationError(f'Solo count must be at least 1, got {solo_count}')
    return solo_count


def calculate_registration_fee(mastery_level, participant_ids, registration_records):
    """报名费子规则：只对未以该组别缴费的舞者收取。

    返回 (费用, 说明, 未缴舞者ID列表, 已缴舞者ID列表)
    """
    level = MasteryLevel.parse(mastery_level)
    per_person = fee_rules.registration_fee_for(level)
    if isinstance(registration_records, dict):
        by_id = dict(registration_records)
    else:
        by_id = {record.dancer_id: record for record in (registration_records or [])}

    owing, paid = [], []
    for dancer_id in participant_ids:
        record = by_id.get(dancer_id)
        if record is not None and record.satisfies(level):
            paid.append(dancer_id)
        else:
            owing.append(dancer_id)

    if not owing:
        rationale = 'All dancers have already paid registration fee'
    elif not paid:
        rationale = f"Registration fee for {_plural(len(owing), 'dancer')}"
    else:
        rationale = f"Registration fee for {_plural(len(owing), 'dancer')} ({len(paid)} already paid)"

    return per_person * len(owing), rationale, owing, paid


def calculate_performance_fee(performance_type, participant_count, solo_count=1):
    """表演费子规则，返回 (费用, 说明)"""
    performance_type = PerformanceType.parse(performance_type)

    if performance_type is PerformanceType.SOLO:
        fee = fee_rules.solo_package_price(solo_count)
        max_package = max(fee_rules.SOLO_PACKAGES)
        if solo_count == 1:
            breakdown = '1 Solo'
        elif solo_count <= max_package:
            breakdown = f'{solo_count} Solos Package'
        else:
            extra = solo_count - max_package
            breakdown = f"{max_package} Solos Package + {_plural(extra, 'Additional Solo')}"
        return fee, breakdown

    if performance_type in (PerformanceType.DUET, PerformanceType.TRIO):
        rate = fee_rules.duet_trio_rate()
        return rate * participant_count, (
            f"{performance_type.value} (R{rate} x {_plural(participant_count, 'dancer')})"
        )

    rate = fee_rules.group_rate(participant_count)
    label = 'Large Group' if fee_rules.is_large_group(participant_count) else 'Small Group'
    return rate * participant_count, f"{label} (R{rate} x {_plural(participant_count, 'dancer')})"


def calculate_fee(performance_type, mastery_level, participant_ids, registration_records=None,
                  solo_count=1):
    """计算一次报名的费用明细"""
    performance_type = PerformanceType.parse(performance_type)
    level = MasteryLevel.parse(mastery_level)
    ids = _normalize_participants(participant_ids)
    solo_count = _normalize_solo_count(solo_count) if performance_type is PerformanceType.SOLO else 1

    registration_fee, registration_breakdown, owing, paid = calculate_registration_fee(
        level, ids, registration_records
    )
    performance_fee, breakdown = calculate_performance_fee(performance_type, len(ids), solo_count)

    return FeeBreakdown(
        registration_fee=registration_fee,
        performance_fee=performance_fee,
        breakdown=breakdown,
        registration_breakdown=registration_breakdown,
        owing_dancer_ids=owing,
        paid_dancer_ids=paid,
    )


class FeeCalculator:
    """报名提交时的费用报价：读取报名费状态快照，只读不写"""

    def __init__(self, tracker):
        self.tracker = tracker

    def compute_fee(self, performance_type, mastery_level, participant_ids, solo_count=None):
        # 先校验，避免无效请求访问存储
        performance_type = PerformanceType.parse(performance_type)
        level = MasteryLevel.parse(mastery_level)
        ids = _normalize_participants(participant_ids)

        records = self.tracker.get_status_for_many(ids)
        fee = calculate_fee(performance_type, level, ids, records, solo_count=solo_count)
        logger.info(
            f"费用报价: {performance_type.value} / {level.value} / {len(ids)} 人, 合计 R{fee.total_fee}"
        )
        return fee
