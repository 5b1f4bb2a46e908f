"""
메트릭 업로드 / 조회 / 삭제 API 엔드포인트

대시보드 프론트엔드가 NDJSON 내보내기 파일을 올리고,
저장된 원문이나 집계 결과를 가져가는 경로입니다.
"""
from flask import Blueprint, current_app, jsonify, request

from copilot_metrics.exceptions import FormatError, MetricsError
from copilot_metrics.logging_config import get_logger
from copilot_metrics.services import build_user_detail

logger = get_logger('api.metrics')

# Blueprint 생성: /api/* 경로로 들어오는 요청을 처리
metrics_bp = Blueprint('metrics', __name__, url_prefix='/api')


def get_dashboard_service():
    """앱 팩토리에서 등록한 DashboardService"""
    return current_app.extensions['dashboard_service']


def error_response(message: str, status_code: int = 500):
    if status_code >= 500:
        logger.error(message)
    else:
        logger.warning(message)
    return jsonify({'error': message}), status_code


@metrics_bp.route('/upload', methods=['POST'])
def upload_metrics():
    """
    NDJSON 파일 업로드

    multipart/form-data의 file 필드를 읽어 검증한 뒤 최신 스냅샷으로 저장합니다.
    형식이 잘못된 파일은 저장하지 않습니다 (기존 스냅샷 유지).
    """
    upload = request.files.get('file')
    if upload is None:
        return error_response('No file uploaded', 400)

    try:
        try:
            content = upload.read().decode('utf-8')
        except UnicodeDecodeError as e:
            raise FormatError('File must be UTF-8 encoded NDJSON') from e

        dashboard = get_dashboard_service().ingest(content)

        return jsonify({
            'success': True,
            'message': 'File uploaded successfully',
            'records': dashboard['record_count']
        }), 200

    except MetricsError as e:
        return error_response(e.message, 400)
    except Exception as e:
        logger.exception(f"업로드 오류: {e}")
        return jsonify({'error': 'Failed to upload file'}), 500


@metrics_bp.route('/metrics', methods=['GET'])
def get_metrics():
    """저장된 최신 NDJSON 원문 반환 (없으면 data: null)"""
    try:
        content = get_dashboard_service().source.fetch_latest_metrics_text()
        return jsonify({'data': content}), 200
    except Exception as e:
        logger.exception(f"메트릭 조회 오류: {e}")
        return jsonify({'error': 'Failed to retrieve metrics'}), 500


@metrics_bp.route('/metrics', methods=['DELETE'])
def clear_metrics():
    """저장된 스냅샷과 로컬 캐시 삭제"""
    try:
        get_dashboard_service().clear()
        return jsonify({'success': True, 'message': 'Metrics cleared'}), 200
    except Exception as e:
        logger.exception(f"메트릭 삭제 오류: {e}")
        return jsonify({'error': 'Failed to clear metrics'}), 500


@metrics_bp.route('/dashboard', methods=['GET'])
def get_dashboard():
    """저장된 데이터의 집계 결과 (요약, 시계열, 사용자 테이블)"""
    try:
        dashboard = get_dashboard_service().load()
        return jsonify({'data': dashboard}), 200
    except MetricsError as e:
        return error_response(e.message, 400)
    except Exception as e:
        logger.exception(f"대시보드 집계 오류: {e}")
        return jsonify({'error': 'Failed to build dashboard'}), 500


@metrics_bp.route('/getuser', methods=['GET'])
def get_user():
    """
    GitHub 사용자 한 명의 통계

    github-username 헤더로 사용자를 지정합니다.
    """
    username = request.headers.get('github-username')
    if not username:
        return error_response('GitHub username header is required', 400)

    try:
        records = get_dashboard_service().fetch_records()
        if not records:
            return error_response('No metrics data available', 404)

        detail = build_user_detail(records, username)
        if detail is None:
            return error_response(f'No data found for user: {username}', 404)

        return jsonify(detail.to_dict()), 200

    except MetricsError as e:
        return error_response(e.message, 400)
    except Exception as e:
        logger.exception(f"사용자 통계 조회 오류: {e}")
        return jsonify({'error': 'Failed to retrieve user statistics'}), 500
