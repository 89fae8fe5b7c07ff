import logging

from mysql.connector import Error

from models import Score


logger = logging.getLogger(__name__)

_SCORE_COLUMNS = """
    score_id, judge_id, performance_id, technical_score, musical_score,
    performance_score, styling_score, overall_impression_score, comments,
    submitted_at, updated_at
"""


def _to_float(value):
    return float(value) if value is not None else None


def row_to_score(row):
    return Score(
        score_id=row['score_id'],
        judge_id=row['judge_id'],
        performance_id=row['performance_id'],
        technical_score=_to_float(row['technical_score']),
        musical_score=_to_float(row['musical_score']),
        performance_score=_to_float(row['performance_score']),
        styling_score=_to_float(row['styling_score']),
        overall_impression_score=_to_float(row['overall_impression_score']),
        comments=row.get('comments'),
        submitted_at=row.get('submitted_at'),
        updated_at=row.get('updated_at'),
    )


class ScoreDbMixin:
    """评分相关数据库操作 mixin。

    依赖宿主类提供:
    - self.get_connection(): 返回数据库连接的上下文管理器
    """

    # ==================== 评分相关操作 ====================

    def upsert_score(self, score):
        """创建或更新评分

        - 首次提交：插入一条新的 scores 记录。
        - 重复提交（同一裁判+表演）：覆盖已有记录（唯一键保证不会重复），
          并在 score_modification_logs 中记录修改前后的总分。
        """
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)

                # 锁定已有记录，拿到修改前的分数用于日志
                cursor.execute(
                    """
                    SELECT score_id, technical_score, musical_score, performance_score,
                           styling_score, overall_impression_score
                    FROM scores
                    WHERE judge_id = %s AND performance_id = %s
                    FOR UPDATE
                    """,
                    (score.judge_id, score.performance_id),
                )
                existing = cursor.fetchone()

                # 同一裁判并发提交时由唯一键串行化，后写入者生效
                cursor.execute(
                    """
                    INSERT INTO scores (
                        judge_id, performance_id,
                        technical_score, musical_score, performance_score,
                        styling_score, overall_impression_score, comments
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    ON DUPLICATE KEY UPDATE
                        score_id = LAST_INSERT_ID(score_id),
                        technical_score = VALUES(technical_score),
                        musical_score = VALUES(musical_score),
                        performance_score = VALUES(performance_score),
                        styling_score = VALUES(styling_score),
                        overall_impression_score = VALUES(overall_impression_score),
                        comments = VALUES(comments),
                        version = version + 1,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (
                        score.judge_id,
                        score.performance_id,
                        score.technical_score,
                        score.musical_score,
                        score.performance_score,
                        score.styling_score,
                        score.overall_impression_score,
                        score.comments,
                    ),
                )

                # LAST_INSERT_ID(score_id) 让覆盖路径也返回已有记录的ID
                score.score_id = cursor.lastrowid

                old_total = None
                if existing:
                    score.score_id = existing['score_id']
                    old_total = sum(float(existing[c] or 0) for c in (
                        'technical_score', 'musical_score', 'performance_score',
                        'styling_score', 'overall_impression_score',
                    ))

                # rowcount 为 2 表示走了 ON DUPLICATE KEY UPDATE（并发首次提交时 existing 为空，原总分未知）
                if existing or cursor.rowcount == 2:
                    cursor.execute(
                        """
                        INSERT INTO score_modification_logs (
                            score_id, performance_id, judge_id,
                            old_total_score, new_total_score, modification_type
                        ) VALUES (%s, %s, %s, %s, %s, %s)
                        """,
                        (
                            score.score_id,
                            score.performance_id,
                            score.judge_id,
                            old_total,
                            score.judge_total(),
                            'resubmission',
                        ),
                    )

                conn.commit()
                return score

        except Error as e:
            logger.error(f"保存评分失败: {e}")
            raise

    def delete_score(self, performance_id, judge_id):
        """删除某位裁判对某表演的评分，返回是否删除了记录"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    """
                    SELECT score_id, technical_score, musical_score, performance_score,
                           styling_score, overall_impression_score
                    FROM scores
                    WHERE judge_id = %s AND performance_id = %s
                    FOR UPDATE
                    """,
                    (judge_id, performance_id),
                )
                existing = cursor.fetchone()
                if not existing:
                    conn.rollback()
                    return False

                cursor.execute("DELETE FROM scores WHERE score_id = %s", (existing['score_id'],))
                cursor.execute(
                    """
                    INSERT INTO score_modification_logs (
                        score_id, performance_id, judge_id,
                        old_total_score, new_total_score, modification_type
                    ) VALUES (%s, %s, %s, %s, NULL, %s)
                    """,
                    (
                        existing['score_id'],
                        performance_id,
                        judge_id,
                        sum(float(existing[c] or 0) for c in (
                            'technical_score', 'musical_score', 'performance_score',
                            'styling_score', 'overall_impression_score',
                        )),
                        'removal',
                    ),
                )
                conn.commit()
                return True

        except Error as e:
            logger.error(f"删除评分失败: {e}")
            raise

    def get_scores_by_performance(self, performance_id):
        """获取表演的所有评分"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    f"SELECT {_SCORE_COLUMNS} FROM scores WHERE performance_id = %s ORDER BY judge_id",
                    (performance_id,),
                )
                return [row_to_score(row) for row in cursor.fetchall()]

        except Error as e:
            logger.error(f"获取评分失败: {e}")
            raise

    def get_scores_for_performances(self, performance_ids):
        """批量获取多个表演的评分，返回 {performance_id: [Score, ...]}"""
        ids = list(performance_ids)
        if not ids:
            return {}
        placeholders = ', '.join(['%s'] * len(ids))
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    f"""
                    SELECT {_SCORE_COLUMNS}
                    FROM scores
                    WHERE performance_id IN ({placeholders})
                    ORDER BY performance_id, judge_id
                    """,
                    tuple(ids),
                )
                scores = {}
                for row in cursor.fetchall():
                    score = row_to_score(row)
                    scores.setdefault(score.performance_id, []).append(score)
                return scores

        except Error as e:
            logger.error(f"批量获取评分失败: {e}")
            raise
