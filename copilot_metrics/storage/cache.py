"""
로컬 폴백 캐시

백엔드 저장소를 사용할 수 없을 때를 대비해 마지막으로 파싱한 레코드를
SQLite(SQLAlchemy)에 보관합니다. 캐시 실패는 로그만 남기고 False/None을 반환합니다.
"""
import json
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime, Integer, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from copilot_metrics.logging_config import get_logger
from copilot_metrics.models import UsageRecord

logger = get_logger('storage.cache')

Base = declarative_base()


class CachedMetrics(Base):
    __tablename__ = "metrics_cache"

    id = Column(Integer, primary_key=True)
    payload = Column(Text, nullable=False)       # 레코드 목록 (JSON 배열)
    saved_at = Column(DateTime, nullable=False)


class MetricsCache:
    """레코드 스냅샷 하나만 보관하는 캐시"""

    def __init__(self, database_url):
        engine_options = {}
        if database_url.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            # 메모리 DB는 연결 하나를 모든 스레드가 공유해야 테이블이 유지됨
            engine_options["poolclass"] = StaticPool

        self.engine = create_engine(database_url, **engine_options)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(self.engine)

    def save(self, records: List[UsageRecord]) -> bool:
        """레코드 목록 저장 (기존 스냅샷 교체)"""
        payload = json.dumps([record.to_dict() for record in records])
        db = self.SessionLocal()
        try:
            db.query(CachedMetrics).delete()
            db.add(CachedMetrics(payload=payload, saved_at=datetime.now(timezone.utc)))
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"캐시 저장 오류: {e}")
            return False
        finally:
            db.close()

    def load(self) -> Optional[List[UsageRecord]]:
        """캐시된 레코드 목록 (없으면 None)"""
        db = self.SessionLocal()
        try:
            cached = db.query(CachedMetrics).first()
            if cached is None:
                return None
            return [UsageRecord.from_dict(data) for data in json.loads(cached.payload)]
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"캐시 로드 오류: {e}")
            return None
        finally:
            db.close()

    def clear(self) -> bool:
        db = self.SessionLocal()
        try:
            db.query(CachedMetrics).delete()
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"캐시 삭제 오류: {e}")
            return False
        finally:
            db.close()

    def timestamp(self) -> Optional[str]:
        """마지막 저장 시각 (ISO-8601)"""
        db = self.SessionLocal()
        try:
            cached = db.query(CachedMetrics).first()
            if cached is None:
                return None
            saved_at = cached.saved_at
            # SQLite는 타임존 정보를 보존하지 않음
            if saved_at.tzinfo is None:
                saved_at = saved_at.replace(tzinfo=timezone.utc)
            return saved_at.isoformat()
        except SQLAlchemyError as e:
            logger.error(f"캐시 시각 조회 오류: {e}")
            return None
        finally:
            db.close()

    def close(self):
        self.engine.dispose()
