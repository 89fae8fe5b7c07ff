#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
舞蹈赛事评分系统 - API接口模块
"""

from .scoring import scoring_bp
from .rankings import rankings_bp
from .fees import fees_bp
from .dancers import dancers_bp
from .performances import performances_bp

__version__ = '1.0.0'

# 导出所有蓝图
__all__ = ['scoring_bp', 'rankings_bp', 'fees_bp', 'dancers_bp', 'performances_bp']
