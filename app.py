import os
import sys
import time

from flask import Flask, request, jsonify, g
from mysql.connector import Error
from werkzeug.middleware.proxy_fix import ProxyFix
from dotenv import load_dotenv

load_dotenv()

from config import config as config_map
from database import DatabaseManager
from api import scoring_bp, rankings_bp, fees_bp, dancers_bp, performances_bp


def create_app(config_name=None, db_manager=None):
    """创建应用

    Args:
        config_name: 配置名称（development / production / testing），默认读取 APP_ENV
        db_manager: 存储对象；为空时按配置创建 DatabaseManager 并初始化表结构
    """
    app = Flask(__name__)
    env_name = (config_name or os.environ.get('APP_ENV', 'default')).lower()
    config_cls = config_map.get(env_name, config_map['default'])
    app.config.from_object(config_cls)
    config_cls.init_app(app)

    if env_name == 'production' and not app.config.get('SECRET_KEY'):
        raise RuntimeError('SECRET_KEY environment variable is required in production')

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    @app.before_request
    def start_request_timer():
        g.request_start_time = time.perf_counter()

    @app.after_request
    def log_request_time(response):
        start_time = getattr(g, 'request_start_time', None)
        if start_time is not None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            app.logger.info(
                "Request %s %s took %.2fms, status %d",
                request.method,
                request.path,
                duration_ms,
                response.status_code,
            )
        return response

    if db_manager is None:
        db_manager = DatabaseManager(config_cls)
        # 启动时显式初始化一次表结构（CREATE TABLE IF NOT EXISTS）
        try:
            db_manager.init_database()
            app.logger.info("数据库初始化成功")
        except Error as e:
            # 记录错误但不阻止应用启动，后续请求会返回 500
            app.logger.error(f"数据库初始化检查失败: {e}")

    app.extensions['db_manager'] = db_manager

    app.register_blueprint(scoring_bp, url_prefix='/api/scores')
    app.register_blueprint(rankings_bp, url_prefix='/api/rankings')
    app.register_blueprint(fees_bp, url_prefix='/api/fees')
    app.register_blueprint(dancers_bp, url_prefix='/api/dancers')
    app.register_blueprint(performances_bp, url_prefix='/api/performances')

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'success': False, 'message': 'Resource not found', 'code': 404}), 404

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'success': False, 'message': 'Internal server error', 'code': 500}), 500

    return app


if __name__ == '__main__':
    try:
        app = create_app()
        app.run(
            host=app.config.get('HOST', '0.0.0.0'),
            port=app.config.get('PORT', 5000),
            debug=app.config.get('DEBUG', True)
        )
    except KeyboardInterrupt:
        sys.exit(0)
