#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
舞蹈赛事评分系统 - 辅助函数
"""


def format_score(score, decimal_places=2):
    """格式化分数显示"""
    if score is None:
        return f"{0:.{decimal_places}f}"

    return f"{float(score):.{decimal_places}f}"


def get_ranking_suffix(rank):
    """名次的英文序数形式，如 1st / 2nd / 11th"""
    if rank is None:
        return ''
    if 10 <= rank % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(rank % 10, 'th')
    return f"{rank}{suffix}"


def parse_id_list(value):
    """把逗号分隔字符串或列表解析为去空白后的ID列表"""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return []
    return [str(item).strip() for item in items if item is not None and str(item).strip()]
