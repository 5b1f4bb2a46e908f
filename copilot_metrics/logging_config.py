"""
Logging configuration for the Copilot metrics dashboard

Production writes JSON lines (python-json-logger) to rotating files and the
container console. Development keeps a readable single-line format.
"""

import os
import logging
import logging.handlers
import uuid
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

APP_NAME = 'copilot-metrics-dashboard'
ROOT_LOGGER = 'copilot_metrics'

MAX_LOG_BYTES = 50 * 1024 * 1024
LOG_BACKUPS = 10

# Third-party loggers are noisy at INFO
LOGGER_LEVELS = {
    'werkzeug': logging.WARNING,
    'urllib3': logging.WARNING,
    'sqlalchemy.engine': logging.WARNING,
    ROOT_LOGGER: logging.INFO,
}


class ProductionFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps every line with app and request context"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        if not log_record.get('timestamp'):
            log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['application'] = APP_NAME
        log_record['environment'] = os.getenv('FLASK_ENV', 'development')
        log_record.update(_request_context())


def _request_context():
    try:
        from flask import g, has_request_context, request
    except ImportError:
        return {}

    if not has_request_context():
        return {}

    return {
        'request_id': getattr(g, 'request_id', None),
        'method': request.method,
        'path': request.path,
        'remote_addr': request.remote_addr,
        'github_username': request.headers.get('github-username'),
    }


def _rotating_handler(log_dir, filename, level, formatter):
    handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, filename),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _production_handlers(log_dir):
    formatter = ProductionFormatter('%(timestamp)s %(level)s %(name)s %(message)s')

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(formatter)

    return [
        _rotating_handler(log_dir, 'application.log', logging.INFO, formatter),
        _rotating_handler(log_dir, 'error.log', logging.ERROR, formatter),
        console,
    ]


def _development_handlers(log_dir):
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console = logging.StreamHandler()
    file_handler = logging.FileHandler(os.path.join(log_dir, 'development.log'), encoding='utf-8')

    handlers = [console, file_handler]
    for handler in handlers:
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(app=None):
    """
    Install root handlers for the current FLASK_ENV

    Args:
        app: Flask application whose own logger should propagate to root (optional)
    """
    flask_env = os.getenv('FLASK_ENV', 'development')
    log_dir = os.getenv('LOG_DIR', 'logs')
    os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if flask_env == 'production':
        handlers = _production_handlers(log_dir)
    else:
        handlers = _development_handlers(log_dir)
    for handler in handlers:
        root_logger.addHandler(handler)

    configure_specific_loggers()

    if app:
        configure_flask_logging(app)

    logging.info(f"Logging configured for {flask_env} environment")


def configure_specific_loggers():
    for name, level in LOGGER_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def configure_flask_logging(app):
    """Route app.logger through the root handlers"""
    app.logger.handlers = []
    app.logger.propagate = True
    app.logger.setLevel(logging.DEBUG if app.config.get('DEBUG') else logging.INFO)


def setup_request_logging(app):
    """
    Tag each request with a request ID and log its start and end

    Args:
        app: Flask application instance
    """
    from flask import g, request

    logger = get_logger('requests')

    @app.before_request
    def before_request():
        g.request_id = str(uuid.uuid4())
        logger.info(
            "Request started",
            extra={
                'content_length': request.content_length,
                'user_agent': request.headers.get('User-Agent')
            }
        )

    @app.after_request
    def after_request(response):
        logger.info(
            "Request completed",
            extra={
                'status_code': response.status_code,
                'response_length': response.content_length
            }
        )
        return response


def get_logger(name):
    """
    Logger under the copilot_metrics namespace

    Args:
        name: Component path, e.g. 'services.aggregator'
    """
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')


def log_security_event(event_type, details, severity='WARNING'):
    """
    Log a security-relevant event (oversized uploads, rejected input)

    Args:
        event_type: Short event name
        details: Dict of event details
        severity: Log level name
    """
    get_logger('security').log(
        logging.getLevelName(severity.upper()),
        f"Security event: {event_type}",
        extra={
            'event_type': event_type,
            'event_category': 'security',
            'details': details
        }
    )


def log_performance_metric(metric_name, value, unit='ms'):
    """
    Log a single performance measurement

    Args:
        metric_name: Name of the metric, e.g. 'dashboard_aggregation'
        value: Measured value
        unit: Unit of measurement
    """
    get_logger('performance').info(
        f"Performance metric: {metric_name}",
        extra={
            'metric_name': metric_name,
            'metric_value': value,
            'metric_unit': unit,
            'event_category': 'performance'
        }
    )
