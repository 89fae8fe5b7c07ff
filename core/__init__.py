"""评分汇总、排名、奖牌等级与报名费计算核心模块。

各子模块通过构造参数接收存储对象。
"""
