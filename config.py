#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
舞蹈赛事评分系统 - 配置文件
"""

import os
import logging
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

class Config:
    """应用配置类"""

    # Flask 基础配置
    SECRET_KEY = os.environ.get('SECRET_KEY')
    JSON_SORT_KEYS = False

    # 数据库配置
    DB_HOST = os.environ.get('DB_HOST') or 'localhost'
    DB_PORT = int(os.environ.get('DB_PORT') or 3306)
    DB_USER = os.environ.get('DB_USER') or 'eodsa'
    DB_PASSWORD = os.environ.get('DB_PASSWORD') or ''
    DB_NAME = os.environ.get('DB_NAME') or 'eodsa_competition'
    # 数据库连接池配置
    DB_POOL_NAME = os.environ.get('DB_POOL_NAME') or 'eodsa_pool'
    DB_POOL_SIZE = int(os.environ.get('DB_POOL_SIZE') or 5)
    # 慢查询阈值（毫秒）
    SLOW_QUERY_THRESHOLD_MS = int(os.environ.get('SLOW_QUERY_THRESHOLD_MS') or 50)

    # 服务器配置
    HOST = os.environ.get('HOST') or '0.0.0.0'
    PORT = int(os.environ.get('PORT') or 5000)
    DEBUG = os.environ.get('DEBUG', 'False').lower() == 'true'

    # 日志配置
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_FILE = os.environ.get('LOG_FILE') or 'eodsa_scoring.log'

    # 系统配置
    SYSTEM_NAME = 'EODSA Competition Scoring'
    SYSTEM_VERSION = '1.0.0'

    # 评分配置（五项评分，每项 0-20 分，每位裁判满分 100）
    SCORING_CONFIG = {
        'criteria': [
            'technical',
            'musical',
            'performance',
            'styling',
            'overall_impression',
        ],
        'criterion_min': 0.0,
        'criterion_max': 20.0,
        'decimal_places': 2,
    }

    # 排名配置
    RANKING_CONFIG = {
        'group_by_fields': ['event_id', 'region', 'age_category', 'performance_type', 'item_style'],
        'export_sheet_name': 'Rankings',
    }

    @staticmethod
    def init_app(app):
        """初始化应用配置"""
        handlers = [logging.StreamHandler()]
        log_file = app.config.get('LOG_FILE')
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

        # 设置日志
        logging.basicConfig(
            level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )

class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'eodsa-scoring-dev-secret-key'
    DB_NAME = os.environ.get('DB_NAME') or 'eodsa_competition_dev'

class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # 生产环境数据库配置（从环境变量获取）
    DB_HOST = os.environ.get('PROD_DB_HOST') or 'localhost'
    DB_USER = os.environ.get('PROD_DB_USER') or 'eodsa_user'
    DB_PASSWORD = os.environ.get('PROD_DB_PASSWORD') or ''
    DB_NAME = os.environ.get('PROD_DB_NAME') or 'eodsa_competition_prod'

class TestingConfig(Config):
    """测试环境配置"""
    TESTING = True
    SECRET_KEY = 'eodsa-scoring-test-secret-key'
    DB_NAME = 'eodsa_competition_test'
    LOG_FILE = None

# 配置映射
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
