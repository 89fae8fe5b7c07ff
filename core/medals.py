"""
奖牌等级划分

按得分百分比查表，从高到低逐项比较，命中第一个 percentage >= 下限 的等级。
边界值归属较高的等级（例如正好 70.0% 为 Silver）。69.x% 落在 Bronze。
"""

from models import MedalTier

BRONZE = MedalTier('bronze', 'Bronze', 0)
SILVER = MedalTier('silver', 'Silver', 1)
SILVER_PLUS = MedalTier('silver_plus', 'Silver+', 2)
GOLD = MedalTier('gold', 'Gold', 3)
LEGEND = MedalTier('legend', 'Legend', 4)
OPUS = MedalTier('opus', 'Opus', 5)
ELITE = MedalTier('elite', 'Elite', 6)

# (下限, 等级)，必须按下限降序排列
MEDAL_THRESHOLDS = (
    (95.0, ELITE),
    (90.0, OPUS),
    (85.0, LEGEND),
    (80.0, GOLD),
    (75.0, SILVER_PLUS),
    (70.0, SILVER),
)

ALL_TIERS = (BRONZE, SILVER, SILVER_PLUS, GOLD, LEGEND, OPUS, ELITE)


def classify_percentage(percentage):
    """百分比 -> 奖牌等级。全函数：NaN 和低于 70 的值都是 Bronze"""
    for threshold, tier in MEDAL_THRESHOLDS:
        if percentage >= threshold:
            return tier
    return BRONZE
