from io import BytesIO

from flask import request, send_file, current_app

from api.services import get_ranking_calculator
from core.rankings import normalize_group_by
from utils.decorators import log_action, handle_db_errors
from utils.excel_handler import ExcelHandler

from . import rankings_bp, logger
from .get_rankings import filters_from_request


@rankings_bp.route('/export', methods=['GET'])
@log_action('导出排名')
@handle_db_errors
def export_rankings():
    """导出排名为 Excel 文件（参数同 GET /api/rankings）"""
    filters = filters_from_request()
    group_by = normalize_group_by(request.args.get('groupBy'))
    rows = get_ranking_calculator().get_rankings(filters, group_by=group_by)

    sheet_name = current_app.config.get('RANKING_CONFIG', {}).get('export_sheet_name', 'Rankings')
    content = ExcelHandler(sheet_name=sheet_name).export_rankings(rows)
    logger.info(f"导出排名 {len(rows)} 条")

    return send_file(
        BytesIO(content),
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name='rankings.xlsx',
    )
