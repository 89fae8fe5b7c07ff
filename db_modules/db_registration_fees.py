import logging

from mysql.connector import Error

from models import RegistrationFeeRecord


logger = logging.getLogger(__name__)


def row_to_registration_fee(row):
    return RegistrationFeeRecord(
        dancer_id=row['dancer_id'],
        paid=bool(row.get('registration_fee_paid')),
        mastery_level=row.get('registration_fee_mastery_level'),
        paid_at=row.get('registration_fee_paid_at'),
    )


class RegistrationFeeDbMixin:
    """舞者报名费状态相关数据库操作 mixin。

    依赖宿主类提供:
    - self.get_connection(): 返回数据库连接的上下文管理器
    """

    def get_registration_fee_record(self, dancer_id):
        """获取舞者的报名费记录，没有记录时返回 None"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    """
                    SELECT dancer_id, registration_fee_paid,
                           registration_fee_mastery_level, registration_fee_paid_at
                    FROM dancer_registration_fees
                    WHERE dancer_id = %s
                    """,
                    (dancer_id,),
                )
                row = cursor.fetchone()
                return row_to_registration_fee(row) if row else None

        except Error as e:
            logger.error(f"获取报名费记录失败: {e}")
            raise

    def get_registration_fee_records(self, dancer_ids):
        """批量获取报名费记录（只返回存在记录的舞者）"""
        ids = list(dancer_ids)
        if not ids:
            return []
        placeholders = ', '.join(['%s'] * len(ids))
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    f"""
                    SELECT dancer_id, registration_fee_paid,
                           registration_fee_mastery_level, registration_fee_paid_at
                    FROM dancer_registration_fees
                    WHERE dancer_id IN ({placeholders})
                    """,
                    tuple(ids),
                )
                return [row_to_registration_fee(row) for row in cursor.fetchall()]

        except Error as e:
            logger.error(f"批量获取报名费记录失败: {e}")
            raise

    def save_registration_fee_paid(self, dancer_id, mastery_level, paid_at):
        """写入已缴状态（覆盖原有组别与时间）"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    INSERT INTO dancer_registration_fees (
                        dancer_id, registration_fee_paid,
                        registration_fee_mastery_level, registration_fee_paid_at
                    ) VALUES (%s, TRUE, %s, %s)
                    ON DUPLICATE KEY UPDATE
                        registration_fee_paid = TRUE,
                        registration_fee_mastery_level = VALUES(registration_fee_mastery_level),
                        registration_fee_paid_at = VALUES(registration_fee_paid_at)
                    """,
                    (dancer_id, mastery_level, paid_at),
                )
                conn.commit()
                return True

        except Error as e:
            logger.error(f"更新报名费状态失败: {e}")
            raise

    def clear_registration_fee(self, dancer_id):
        """清除缴费标记、组别和缴费时间"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    UPDATE dancer_registration_fees
                    SET registration_fee_paid = FALSE,
                        registration_fee_mastery_level = NULL,
                        registration_fee_paid_at = NULL
                    WHERE dancer_id = %s
                    """,
                    (dancer_id,),
                )
                conn.commit()
                return cursor.rowcount > 0

        except Error as e:
            logger.error(f"清除报名费状态失败: {e}")
            raise
