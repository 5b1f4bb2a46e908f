"""
Production WSGI entry point

Wraps the application factory with JSON logging, request IDs, per-endpoint
timing, security headers and JSON error pages.

    gunicorn --config deployment/gunicorn_config.py deployment.production_app:application
"""

import sys
import time
from flask import request, g

from copilot_metrics.app import create_app
from copilot_metrics.logging_config import (
    setup_logging,
    setup_request_logging,
    get_logger,
    log_performance_metric,
)

SLOW_REQUEST_MS = 1000

logger = get_logger('production')


def create_production_app():
    setup_logging()

    app = create_app('production')
    setup_request_logging(app)
    add_security_headers(app)
    add_performance_monitoring(app)
    add_error_handling(app)

    logger.info("Production application created")
    return app


def add_security_headers(app):
    """JSON API 응답에 공통 보안 헤더 추가"""

    @app.after_request
    def set_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers.pop('Server', None)
        return response


def add_performance_monitoring(app):
    """엔드포인트별 처리 시간 기록 (업로드는 요청 크기도 함께)"""

    @app.before_request
    def start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def record_duration(response):
        started = getattr(g, 'start_time', None)
        if started is None:
            return response

        duration = (time.perf_counter() - started) * 1000
        endpoint = request.endpoint or 'unmatched'

        if duration > SLOW_REQUEST_MS:
            get_logger('performance').warning(
                "Slow request detected",
                extra={
                    'duration_ms': round(duration, 2),
                    'endpoint': endpoint,
                    'upload_bytes': request.content_length,
                    'status_code': response.status_code
                }
            )

        log_performance_metric(f"{request.method}_{endpoint}", round(duration, 2))
        return response


def add_error_handling(app):
    """블루프린트 밖에서 발생한 오류도 JSON으로 응답"""

    @app.errorhandler(404)
    def handle_not_found(error):
        get_logger('errors').warning(f"404 Not Found: {request.path}")
        return {'error': 'Resource not found'}, 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return {'error': 'Method not allowed'}, 405

    @app.errorhandler(500)
    def handle_internal_error(error):
        get_logger('errors').error(f"Internal server error: {error}", exc_info=True)
        return {'error': 'Internal server error'}, 500


if __name__ == '__main__':
    print("Run with gunicorn: gunicorn --config deployment/gunicorn_config.py deployment.production_app:application")
    sys.exit(1)


application = create_production_app()
