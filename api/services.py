"""
请求内获取数据库管理器与核心服务对象
"""

from flask import current_app

from core.fee_calculator import FeeCalculator
from core.rankings import RankingCalculator
from core.registration_fees import RegistrationFeeTracker
from core.scores import ScoreService


def get_db_manager():
    """create_app 注册的数据库管理器（测试时可以是内存存储）"""
    return current_app.extensions['db_manager']


def get_score_service():
    return ScoreService(get_db_manager())


def get_ranking_calculator():
    return RankingCalculator(get_db_manager())


def get_registration_tracker():
    return RegistrationFeeTracker(get_db_manager())


def get_fee_calculator():
    return FeeCalculator(get_registration_tracker())
