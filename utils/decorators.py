#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
舞蹈赛事评分系统 - 接口装饰器（参数校验、操作日志、错误处理）
"""

from functools import wraps
import logging
import time

from flask import jsonify, request
from mysql.connector import Error

from core.errors import InputValidationError, NotFoundError, RankingComputationError

logger = logging.getLogger(__name__)


def validate_json(required_fields=None):
    """JSON数据验证装饰器

    Args:
        required_fields: 必需的字段列表
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not request.is_json:
                return jsonify({'success': False, 'message': 'Request body must be JSON', 'code': 400}), 400

            data = request.get_json(silent=True)
            if not isinstance(data, dict) or not data:
                return jsonify({'success': False, 'message': 'JSON body is empty', 'code': 400}), 400

            if required_fields:
                missing_fields = [
                    field for field in required_fields
                    if field not in data or data[field] is None or data[field] == ''
                ]
                if missing_fields:
                    return jsonify({
                        'success': False,
                        'message': f'Missing required fields: {", ".join(missing_fields)}',
                        'code': 400
                    }), 400

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def log_action(action_name):
    """操作日志装饰器

    Args:
        action_name: 操作名称
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            start_time = time.perf_counter()
            logger.info(f"开始执行操作: {action_name} ({request.method} {request.path})")

            try:
                result = f(*args, **kwargs)
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.info(f"成功完成操作: {action_name}, 耗时: {duration_ms:.1f} ms")
                return result

            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(f"执行操作失败: {action_name}, 耗时: {duration_ms:.1f} ms, 错误: {str(e)}")
                raise

        return decorated_function
    return decorator


def handle_db_errors(f):
    """把核心模块的异常映射为 JSON 错误响应

    - InputValidationError -> 400
    - NotFoundError -> 404
    - RankingComputationError / 数据库错误 -> 500
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except InputValidationError as e:
            return jsonify({'success': False, 'message': str(e), 'code': 400}), 400
        except NotFoundError as e:
            return jsonify({'success': False, 'message': str(e), 'code': 404}), 404
        except RankingComputationError as e:
            logger.error(f"排名计算错误: {str(e)}")
            return jsonify({'success': False, 'message': str(e), 'code': 500}), 500
        except Error as e:
            logger.error(f"数据库操作错误: {str(e)}")
            return jsonify({
                'success': False,
                'message': 'Database operation failed, please try again later',
                'code': 500
            }), 500

    return decorated_function
