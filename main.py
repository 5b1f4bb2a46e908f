"""
Copilot Metrics Dashboard Backend - 개발 서버 실행
"""
import os

from copilot_metrics.app import create_app
from copilot_metrics.logging_config import setup_logging

if __name__ == '__main__':
    app = create_app()
    setup_logging(app)

    port = app.config['PORT']
    debug = app.config['DEBUG']

    print(f"""
    ========================================
    Copilot Metrics Dashboard Backend
    Environment: {os.getenv('FLASK_ENV', 'development')}
    Port: {port}
    Storage: {app.config['STORAGE_PATH']}
    Debug: {debug}
    ========================================
    """)

    # Flask 개발 서버 실행
    app.run(host='0.0.0.0', port=port, debug=debug)
