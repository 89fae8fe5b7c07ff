#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
舞蹈赛事评分系统 - 数据模型定义
"""

from datetime import datetime
from enum import Enum

from core.errors import InputValidationError


def _parse_enum(enum_cls, value, label):
    """按值或名称（不区分大小写）解析枚举，未知值直接报错"""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        for member in enum_cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
    raise InputValidationError(f'Unknown {label}: {value!r}')


class PerformanceType(Enum):
    """表演类型枚举"""
    SOLO = 'Solo'      # 独舞
    DUET = 'Duet'      # 双人舞
    TRIO = 'Trio'      # 三人舞
    GROUP = 'Group'    # 群舞（4人及以上）

    @classmethod
    def parse(cls, value):
        return _parse_enum(cls, value, 'performance type')


# 工作室报名的账户类型
STUDIO_CONTESTANT = 'studio'


class MasteryLevel(Enum):
    """竞技组别枚举"""
    WATER = 'Water (Competitive)'
    FIRE = 'Fire (Advanced)'

    @classmethod
    def parse(cls, value):
        # 也接受简写 "Water" / "Fire"
        return _parse_enum(cls, value, 'mastery level')


class Performance:
    """表演模型（一个被评分的参赛节目）"""
    def __init__(self, performance_id=None, event_id=None, title=None,
                 participant_ids=None, participant_names=None, contestant_name=None,
                 contestant_type=None, studio_name=None, choreographer=None, mastery=None,
                 item_style=None, item_number=None, withdrawn_from_judging=False, event_name=None,
                 region=None, age_category=None, performance_type=None):
        self.performance_id = performance_id
        self.event_id = event_id
        self.title = title
        self.participant_ids = list(participant_ids or [])
        self.participant_names = list(participant_names or [])
        self.contestant_name = contestant_name
        # 报名账户类型: studio（舞蹈工作室）或 private（个人）
        self.contestant_type = contestant_type
        self.studio_name = studio_name
        self.choreographer = choreographer
        self.mastery = mastery
        self.item_style = item_style
        self.item_number = item_number
        self.withdrawn_from_judging = bool(withdrawn_from_judging)
        # 以下字段来自所属赛事
        self.event_name = event_name
        self.region = region
        self.age_category = age_category
        self.performance_type = performance_type

    def to_dict(self):
        """转换为字典"""
        return {
            'performance_id': self.performance_id,
            'event_id': self.event_id,
            'event_name': self.event_name,
            'title': self.title,
            'participant_ids': self.participant_ids,
            'participant_names': self.participant_names,
            'contestant_name': self.contestant_name,
            'contestant_type': self.contestant_type,
            'studio_name': self.studio_name,
            'choreographer': self.choreographer,
            'mastery': self.mastery,
            'item_style': self.item_style,
            'item_number': self.item_number,
            'withdrawn_from_judging': self.withdrawn_from_judging,
            'region': self.region,
            'age_category': self.age_category,
            'performance_type': self.performance_type,
        }


class PerformancePatch:
    """表演的部分更新：只有设置了的字段才会写入数据库"""

    # 字段名 -> 列名（固定顺序，列名不来自调用方输入）
    COLUMNS = (
        ('item_number', 'item_number'),
        ('withdrawn_from_judging', 'withdrawn_from_judging'),
    )

    def __init__(self, item_number=None, withdrawn_from_judging=None):
        self.item_number = item_number
        self.withdrawn_from_judging = withdrawn_from_judging

    def fields(self):
        """返回 [(列名, 值)]，跳过未设置的字段"""
        present = []
        for attr, column in self.COLUMNS:
            value = getattr(self, attr)
            if value is not None:
                present.append((column, value))
        return present

    def is_empty(self):
        return not self.fields()


class Score:
    """评分模型（一位裁判对一个表演的五项评分）"""
    def __init__(self, score_id=None, judge_id=None, performance_id=None,
                 technical_score=0.0, musical_score=0.0, performance_score=0.0,
                 styling_score=0.0, overall_impression_score=0.0, comments=None,
                 submitted_at=None, updated_at=None):
        self.score_id = score_id
        self.judge_id = judge_id
        self.performance_id = performance_id
        self.technical_score = technical_score
        self.musical_score = musical_score
        self.performance_score = performance_score
        self.styling_score = styling_score
        self.overall_impression_score = overall_impression_score
        self.comments = comments
        self.submitted_at = submitted_at or datetime.now()
        self.updated_at = updated_at or datetime.now()

    def criteria(self):
        """按固定顺序返回五项分数"""
        return [
            self.technical_score,
            self.musical_score,
            self.performance_score,
            self.styling_score,
            self.overall_impression_score,
        ]

    def judge_total(self):
        """计算该裁判的总分（0-100）"""
        return sum(self.criteria())

    def to_dict(self):
        """转换为字典"""
        return {
            'score_id': self.score_id,
            'judge_id': self.judge_id,
            'performance_id': self.performance_id,
            'technical_score': self.technical_score,
            'musical_score': self.musical_score,
            'performance_score': self.performance_score,
            'styling_score': self.styling_score,
            'overall_impression_score': self.overall_impression_score,
            'total_score': self.judge_total(),
            'comments': self.comments,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


class AggregatedResult:
    """单个表演所有裁判评分的汇总结果（派生数据，不入库）"""
    def __init__(self, performance_id=None, total_score=0.0, average_score=0.0,
                 judge_count=0, percentage=0.0):
        self.performance_id = performance_id
        self.total_score = total_score
        self.average_score = average_score
        self.judge_count = judge_count
        self.percentage = percentage

    @property
    def max_possible(self):
        return self.judge_count * 100

    def to_dict(self):
        """转换为字典"""
        return {
            'performance_id': self.performance_id,
            'total_score': self.total_score,
            'average_score': self.average_score,
            'judge_count': self.judge_count,
            'max_possible': self.max_possible,
            'percentage': round(self.percentage, 2),
        }


class MedalTier:
    """奖牌等级"""
    def __init__(self, type, label, level):
        self.type = type
        self.label = label
        self.level = level

    def __repr__(self):
        return f'MedalTier({self.label})'

    def to_dict(self):
        return {'type': self.type, 'label': self.label, 'level': self.level}


class RegistrationFeeRecord:
    """舞者一次性报名费缴纳记录"""
    def __init__(self, dancer_id=None, paid=False, mastery_level=None, paid_at=None):
        self.dancer_id = dancer_id
        self.paid = bool(paid)
        self.mastery_level = mastery_level
        self.paid_at = paid_at

    def satisfies(self, mastery_level):
        """只有以同一组别缴费才算已缴（在一个组别缴费不覆盖其他组别）"""
        requested = mastery_level.value if isinstance(mastery_level, MasteryLevel) else mastery_level
        paid_level = self.mastery_level.value if isinstance(self.mastery_level, MasteryLevel) else self.mastery_level
        return self.paid and paid_level is not None and paid_level == requested

    def to_dict(self):
        """转换为字典"""
        return {
            'dancer_id': self.dancer_id,
            'paid': self.paid,
            'mastery_level': self.mastery_level,
            'paid_at': self.paid_at.isoformat() if self.paid_at else None,
        }


class FeeBreakdown:
    """费用明细（每次请求重新计算，不作为权威数据入库）"""
    def __init__(self, registration_fee=0, performance_fee=0, breakdown='',
                 registration_breakdown='', owing_dancer_ids=None, paid_dancer_ids=None):
        self.registration_fee = registration_fee
        self.performance_fee = performance_fee
        self.total_fee = registration_fee + performance_fee
        self.breakdown = breakdown
        self.registration_breakdown = registration_breakdown
        self.owing_dancer_ids = list(owing_dancer_ids or [])
        self.paid_dancer_ids = list(paid_dancer_ids or [])

    def to_dict(self):
        """转换为字典"""
        return {
            'registration_fee': self.registration_fee,
            'performance_fee': self.performance_fee,
            'total_fee': self.total_fee,
            'breakdown': self.breakdown,
            'registration_breakdown': self.registration_breakdown,
            'owing_dancer_ids': self.owing_dancer_ids,
            'paid_dancer_ids': self.paid_dancer_ids,
        }


class RankingRow:
    """排名结果中的一行"""
    def __init__(self, performance, result, contestant_name, medal, rank=None):
        self.performance_id = performance.performance_id
        self.event_id = performance.event_id
        self.event_name = performance.event_name
        self.region = performance.region
        self.age_category = performance.age_category
        self.performance_type = performance.performance_type
        self.item_style = performance.item_style
        self.title = performance.title
        self.participant_names = list(performance.participant_names)
        # 只有工作室报名的表演才显示工作室名称
        self.studio_name = performance.studio_name if performance.contestant_type == STUDIO_CONTESTANT else None
        self.choreographer = performance.choreographer
        self.mastery = performance.mastery
        self.item_number = performance.item_number
        self.contestant_name = contestant_name
        self.total_score = result.total_score
        self.average_score = result.average_score
        self.judge_count = result.judge_count
        self.percentage = result.percentage
        self.medal = medal
        self.rank = rank

    @property
    def ranking_level(self):
        return self.medal.label

    def to_dict(self):
        """转换为字典"""
        return {
            'performance_id': self.performance_id,
            'event_id': self.event_id,
            'event_name': self.event_name,
            'region': self.region,
            'age_category': self.age_category,
            'performance_type': self.performance_type,
            'item_style': self.item_style,
            'title': self.title,
            'contestant_name': self.contestant_name,
            'participant_names': self.participant_names,
            'studio_name': self.studio_name,
            'choreographer': self.choreographer,
            'mastery': self.mastery,
            'item_number': self.item_number,
            'total_score': self.total_score,
            'average_score': round(self.average_score, 2),
            'rank': self.rank,
            'judge_count': self.judge_count,
            'percentage': round(self.percentage, 2),
            'ranking_level': self.medal.label,
            'medal_type': self.medal.type,
        }


# 数据库表结构定义
DATABASE_SCHEMA = {
    'events': '''
        CREATE TABLE IF NOT EXISTS events (
            event_id VARCHAR(64) PRIMARY KEY,
            name VARCHAR(200) NOT NULL,
            region VARCHAR(100) NOT NULL DEFAULT 'Nationals',
            age_category VARCHAR(50),
            performance_type ENUM('Solo', 'Duet', 'Trio', 'Group', 'All') DEFAULT 'All',
            event_date DATETIME NULL,
            venue VARCHAR(200),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            INDEX idx_region_age_type (region, age_category, performance_type)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci COMMENT='赛事表（地区、年龄组、表演类型）';
    ''',

    'performances': '''
        CREATE TABLE IF NOT EXISTS performances (
            performance_id VARCHAR(64) PRIMARY KEY,
            event_id VARCHAR(64) NOT NULL,
            title VARCHAR(255) NOT NULL,
            participant_ids TEXT COMMENT '参赛舞者ID（JSON 数组）',
            participant_names TEXT COMMENT '参赛舞者姓名（JSON 数组）',
            contestant_name VARCHAR(200) COMMENT '报名账户名称',
            contestant_type VARCHAR(20) DEFAULT 'private' COMMENT '报名账户类型（studio / private）',
            studio_name VARCHAR(200),
            choreographer VARCHAR(200),
            mastery VARCHAR(50),
            item_style VARCHAR(100),
            item_number INT NULL COMMENT '出场编号',
            withdrawn_from_judging BOOLEAN DEFAULT FALSE COMMENT '是否退出评分',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (event_id) REFERENCES events(event_id) ON DELETE CASCADE,
            INDEX idx_event (event_id),
            INDEX idx_event_style (event_id, item_style)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci COMMENT='表演表（报名审核通过后创建）';
    ''',

    'scores': '''
        CREATE TABLE IF NOT EXISTS scores (
            score_id INT AUTO_INCREMENT PRIMARY KEY,
            judge_id VARCHAR(64) NOT NULL,
            performance_id VARCHAR(64) NOT NULL,
            technical_score DECIMAL(5,2) NOT NULL DEFAULT 0.00,
            musical_score DECIMAL(5,2) NOT NULL DEFAULT 0.00,
            performance_score DECIMAL(5,2) NOT NULL DEFAULT 0.00,
            styling_score DECIMAL(5,2) NOT NULL DEFAULT 0.00,
            overall_impression_score DECIMAL(5,2) NOT NULL DEFAULT 0.00,
            comments TEXT,
            submitted_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            version INT DEFAULT 1 COMMENT '版本号',
            FOREIGN KEY (performance_id) REFERENCES performances(performance_id) ON DELETE CASCADE,
            UNIQUE KEY unique_judge_performance (judge_id, performance_id),
            INDEX idx_performance (performance_id)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci COMMENT='评分表（每位裁判对每个表演最多一条）';
    ''',

    'score_modification_logs': '''
        CREATE TABLE IF NOT EXISTS score_modification_logs (
            score_log_id BIGINT AUTO_INCREMENT PRIMARY KEY,
            score_id INT NOT NULL COMMENT '成绩ID',
            performance_id VARCHAR(64) NOT NULL,
            judge_id VARCHAR(64) NOT NULL,
            old_total_score DECIMAL(6,2) COMMENT '原总分',
            new_total_score DECIMAL(6,2) COMMENT '新总分',
            modification_type ENUM('resubmission', 'removal') NOT NULL COMMENT '修改类型',
            modified_at DATETIME DEFAULT CURRENT_TIMESTAMP COMMENT '修改时间',
            INDEX idx_performance_time (performance_id, modified_at),
            INDEX idx_judge (judge_id)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci COMMENT='成绩修改历史表';
    ''',

    'dancer_registration_fees': '''
        CREATE TABLE IF NOT EXISTS dancer_registration_fees (
            dancer_id VARCHAR(64) PRIMARY KEY,
            registration_fee_paid BOOLEAN NOT NULL DEFAULT FALSE,
            registration_fee_mastery_level VARCHAR(50) NULL,
            registration_fee_paid_at DATETIME NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci COMMENT='舞者报名费缴纳状态表（仅管理员操作）';
    ''',
}
