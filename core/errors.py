"""核心计算异常定义"""


class CompetitionError(Exception):
    """核心模块异常基类"""


class InputValidationError(CompetitionError, ValueError):
    """输入不合法（未知组别/表演类型、人数或分数越界等），始终直接抛给调用方"""


class NotFoundError(CompetitionError):
    """引用的表演或记录不存在"""


class RankingComputationError(CompetitionError):
    """排名计算期间存储层失败。

    与“没有结果”区分：空列表是合法的成功结果，这个异常表示无法加载排名。
    """
