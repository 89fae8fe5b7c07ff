#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
舞蹈赛事评分系统 - 数据库连接和操作
"""

import mysql.connector
from mysql.connector import Error, pooling
from contextlib import contextmanager
import logging
import time

from config import Config
from models import DATABASE_SCHEMA
from db_modules.db_performances import PerformanceDbMixin
from db_modules.db_scores import ScoreDbMixin
from db_modules.db_registration_fees import RegistrationFeeDbMixin

logger = logging.getLogger(__name__)


class TimedCursorWrapper:
    def __init__(self, cursor, slow_threshold_ms=50):
        self._cursor = cursor
        self._slow_threshold_ms = slow_threshold_ms

    def execute(self, operation, params=None, multi=False):
        start = time.perf_counter()
        try:
            return self._cursor.execute(operation, params, multi)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            if duration_ms >= self._slow_threshold_ms:
                logger.warning(
                    "Slow query took %.1f ms: %s; params=%s",
                    duration_ms,
                    operation,
                    params,
                )

    def executemany(self, operation, seq_params):
        start = time.perf_counter()
        try:
            return self._cursor.executemany(operation, seq_params)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            if duration_ms >= self._slow_threshold_ms:
                logger.warning(
                    "Slow query (executemany) took %.1f ms: %s; params_count=%d",
                    duration_ms,
                    operation,
                    len(seq_params) if seq_params is not None else 0,
                )

    def __getattr__(self, item):
        return getattr(self._cursor, item)


class DatabaseManager(
    PerformanceDbMixin,
    ScoreDbMixin,
    RegistrationFeeDbMixin,
):
    """数据库管理器

    由宿主应用在启动时创建一次并显式调用 init_database()，
    之后作为存储对象传给各核心计算模块。
    """

    def __init__(self, config_obj=Config):
        self.slow_threshold_ms = getattr(config_obj, 'SLOW_QUERY_THRESHOLD_MS', 50)
        self.config = {
            'host': config_obj.DB_HOST,
            'port': config_obj.DB_PORT,
            'user': config_obj.DB_USER,
            'password': config_obj.DB_PASSWORD,
            'database': config_obj.DB_NAME,
            'charset': 'utf8mb4',
            'collation': 'utf8mb4_unicode_ci',
            'autocommit': False,
            'raise_on_warnings': False,
            'connection_timeout': 30
        }
        self.pool_name = getattr(config_obj, 'DB_POOL_NAME', 'eodsa_pool')
        self.pool_size = getattr(config_obj, 'DB_POOL_SIZE', 5)
        self.pool = None
        self.initialized = False

    def _create_pool(self):
        """创建连接池，失败时回退到直连模式"""
        try:
            self.pool = pooling.MySQLConnectionPool(
                pool_name=self.pool_name,
                pool_size=self.pool_size,
                pool_reset_session=True,
                **self.config
            )
            logger.info(f"数据库连接池创建成功，池大小: {self.pool_size}")
        except Error as e:
            logger.error(f"创建数据库连接池失败，将回退到直连模式: {e}")
            self.pool = None

    @contextmanager
    def get_connection(self):
        """获取数据库连接的上下文管理器"""
        connection = None
        try:
            if self.pool:
                connection = self.pool.get_connection()
            else:
                connection = mysql.connector.connect(**self.config)

            original_cursor = connection.cursor

            def timed_cursor(*args, **kwargs):
                base_cursor = original_cursor(*args, **kwargs)
                return TimedCursorWrapper(base_cursor, slow_threshold_ms=self.slow_threshold_ms)

            connection.cursor = timed_cursor

            yield connection
        except Error as e:
            logger.error(f"数据库连接错误: {e}")
            if connection:
                connection.rollback()
            raise
        finally:
            if connection and connection.is_connected():
                connection.close()

    def init_database(self):
        """初始化数据库和表（幂等，可重复调用）"""
        if self.initialized:
            return
        try:
            # 首先连接到MySQL服务器（不指定数据库）
            temp_config = self.config.copy()
            database_name = temp_config.pop('database')

            with mysql.connector.connect(**temp_config) as connection:
                cursor = connection.cursor()
                cursor.execute(
                    f"CREATE DATABASE IF NOT EXISTS `{database_name}` "
                    "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
                )

            self._create_pool()

            # 连接到指定数据库并创建表
            with self.get_connection() as connection:
                cursor = connection.cursor()
                for table_name, schema in DATABASE_SCHEMA.items():
                    cursor.execute(schema)
                    logger.debug(f"检查表 {table_name}")
                connection.commit()

            self.initialized = True
            logger.info("数据库初始化完成")

        except Error as e:
            logger.error(f"数据库初始化失败: {e}")
            raise
