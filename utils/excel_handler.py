"""
Excel处理工具类
用于导出排名结果
"""

from io import BytesIO

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill

from utils.helpers import format_score, get_ranking_suffix


class ExcelHandler:
    # 列标题 -> 取值函数
    RANKING_COLUMNS = (
        ('Rank', lambda r: get_ranking_suffix(r.rank)),
        ('Item No.', lambda r: r.item_number),
        ('Contestant', lambda r: r.contestant_name),
        ('Title', lambda r: r.title),
        ('Studio', lambda r: r.studio_name),
        ('Event', lambda r: r.event_name),
        ('Region', lambda r: r.region),
        ('Age Category', lambda r: r.age_category),
        ('Performance Type', lambda r: r.performance_type),
        ('Style', lambda r: r.item_style),
        ('Judges', lambda r: r.judge_count),
        ('Total Score', lambda r: format_score(r.total_score)),
        ('Average Score', lambda r: format_score(r.average_score)),
        ('Percentage', lambda r: format_score(r.percentage)),
        ('Medal', lambda r: r.ranking_level),
    )

    def __init__(self, sheet_name='Rankings'):
        self.sheet_name = sheet_name

    def rankings_to_dataframe(self, rows):
        headers = [header for header, _ in self.RANKING_COLUMNS]
        data = [[getter(row) for _, getter in self.RANKING_COLUMNS] for row in rows]
        return pd.DataFrame(data, columns=headers)

    def export_rankings(self, rows):
        """
        生成排名Excel文件，返回文件内容（bytes）
        """
        df = self.rankings_to_dataframe(rows)

        output = BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name=self.sheet_name, index=False)

            worksheet = writer.sheets[self.sheet_name]

            # 表头样式
            for cell in worksheet[1]:
                cell.font = Font(bold=True)
                cell.alignment = Alignment(horizontal='center')
                cell.fill = PatternFill(start_color='CCCCCC', end_color='CCCCCC', fill_type='solid')

            # 调整列宽
            for column in worksheet.columns:
                max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
                worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

        output.seek(0)
        return output.getvalue()
