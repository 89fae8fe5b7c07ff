"""
舞者一次性报名费状态跟踪

只由管理员操作写入；费用计算只读取快照，不会回写。
"""

import logging
from datetime import datetime

from mysql.connector import Error

from core.errors import InputValidationError
from core.fee_rules import registration_fee_for
from models import MasteryLevel, RegistrationFeeRecord

logger = logging.getLogger(__name__)


def _check_dancer_id(dancer_id):
    if dancer_id is None or str(dancer_id).strip() == '':
        raise InputValidationError('Dancer id is required')
    return str(dancer_id).strip()


class RegistrationFeeTracker:
    """报名费状态表的读写入口。

    store 需要提供:
    - get_registration_fee_record(dancer_id)
    - get_registration_fee_records(dancer_ids)
    - save_registration_fee_paid(dancer_id, mastery_level, paid_at)
    - clear_registration_fee(dancer_id)
    """

    def __init__(self, store):
        self.store = store

    def mark_paid(self, dancer_id, mastery_level):
        """标记已缴费，覆盖之前的状态"""
        dancer_id = _check_dancer_id(dancer_id)
        level = MasteryLevel.parse(mastery_level)
        paid_at = datetime.now()
        self.store.save_registration_fee_paid(dancer_id, level.value, paid_at)
        logger.info(f"舞者 {dancer_id} 报名费已标记为已缴（组别: {level.value}）")
        return RegistrationFeeRecord(dancer_id=dancer_id, paid=True,
                                     mastery_level=level.value, paid_at=paid_at)

    def mark_unpaid(self, dancer_id):
        """清除缴费标记与组别"""
        dancer_id = _check_dancer_id(dancer_id)
        self.store.clear_registration_fee(dancer_id)
        logger.info(f"舞者 {dancer_id} 报名费已标记为未缴")
        return RegistrationFeeRecord(dancer_id=dancer_id, paid=False)

    def get_status(self, dancer_id):
        dancer_id = _check_dancer_id(dancer_id)
        record = self.store.get_registration_fee_record(dancer_id)
        return record or RegistrationFeeRecord(dancer_id=dancer_id, paid=False)

    def get_status_for_many(self, dancer_ids):
        """批量查询，保持输入顺序；没有记录的舞者视为未缴"""
        ids = [_check_dancer_id(d) for d in dancer_ids]
        if not ids:
            return []
        records = self.store.get_registration_fee_records(ids)
        by_id = {record.dancer_id: record for record in records}
        return [by_id.get(d) or RegistrationFeeRecord(dancer_id=d, paid=False) for d in ids]

    def mark_group_paid(self, dancer_ids, mastery_level):
        """为一组舞者标记已缴，逐个记录成功或失败"""
        level = MasteryLevel.parse(mastery_level)
        results = []
        for dancer_id in dancer_ids:
            try:
                self.mark_paid(dancer_id, level)
                results.append({'dancer_id': dancer_id, 'success': True})
            except (InputValidationError, Error) as e:
                logger.error(f"标记舞者 {dancer_id} 报名费失败: {e}")
                results.append({'dancer_id': dancer_id, 'success': False, 'error': str(e)})
        return results

    def check_group_status(self, dancer_ids, mastery_level):
        """分析一组舞者在指定组别下还需缴纳的报名费"""
        level = MasteryLevel.parse(mastery_level)
        records = self.get_status_for_many(dancer_ids)
        need_registration = [r.dancer_id for r in records if not r.satisfies(level)]
        already_paid = [r.dancer_id for r in records if r.satisfies(level)]
        return {
            'mastery_level': level.value,
            'total_dancers': len(records),
            'need_registration': need_registration,
            'already_paid': already_paid,
            'registration_fee_required': registration_fee_for(level) * len(need_registration),
        }
