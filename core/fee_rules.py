"""
EODSA 费用标准（南非兰特）

报名费按人、按组别一次性收取；表演费按表演类型与人数/独舞数量分档。
"""

from core.errors import InputValidationError
from models import MasteryLevel

# 每人一次性报名费
REGISTRATION_FEES = {
    MasteryLevel.WATER: 250,
    MasteryLevel.FIRE: 250,
}

# 独舞套餐价（第 5 支独舞免费，与 4 支同价）
SOLO_PACKAGES = {
    1: 400,
    2: 750,
    3: 1000,
    4: 1200,
    5: 1200,
}
# 超过 5 支后每支独舞的加价
ADDITIONAL_SOLO_FEE = 100

# 双人舞/三人舞每人费用
DUET_TRIO_FEE_PER_PERSON = 280

# 群舞每人费用，10 人及以上按大群舞计
LARGE_GROUP_THRESHOLD = 10
SMALL_GROUP_FEE_PER_PERSON = 220
LARGE_GROUP_FEE_PER_PERSON = 190


def registration_fee_for(mastery_level):
    """查询组别对应的每人报名费"""
    level = MasteryLevel.parse(mastery_level)
    try:
        return REGISTRATION_FEES[level]
    except KeyError:
        raise InputValidationError(f'No registration fee defined for mastery level {level.value!r}')


def solo_package_price(solo_count):
    """独舞套餐价：1-5 支查表，超过 5 支按 price(5) + 超出部分 * 加价"""
    if solo_count < 1:
        raise InputValidationError(f'Solo count must be at least 1, got {solo_count}')
    if solo_count in SOLO_PACKAGES:
        return SOLO_PACKAGES[solo_count]
    max_package = max(SOLO_PACKAGES)
    return SOLO_PACKAGES[max_package] + (solo_count - max_package) * ADDITIONAL_SOLO_FEE


def duet_trio_rate():
    return DUET_TRIO_FEE_PER_PERSON


def is_large_group(participant_count):
    return participant_count >= LARGE_GROUP_THRESHOLD


def group_rate(participant_count):
    """群舞每人费用"""
    if is_large_group(participant_count):
        return LARGE_GROUP_FEE_PER_PERSON
    return SMALL_GROUP_FEE_PER_PERSON
