"""
Database Service for case snapshot persistence
"""
import os
from typing import Dict, Any, Optional, List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from models.case_record import Base, CaseRecord
from utils.logging_config import get_logger

logger = get_logger('services.database')

DEFAULT_DATABASE_URL = 'sqlite:///dispute_cases.db'


class DatabaseService:
    """
    Service for storing the latest snapshot of every dispute case
    """

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL)

        engine_kwargs: Dict[str, Any] = {'echo': False}
        if self.database_url.startswith('sqlite'):
            engine_kwargs['connect_args'] = {'check_same_thread': False}
            if ':memory:' in self.database_url or self.database_url == 'sqlite://':
                # Every connection must see the same in-memory database
                engine_kwargs['poolclass'] = StaticPool
        else:
            engine_kwargs.update(pool_size=10, max_overflow=20, pool_pre_ping=True, pool_recycle=3600)

        self._engine = create_engine(self.database_url, **engine_kwargs)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine
        )

        Base.metadata.create_all(bind=self._engine)
        logger.info("Database service initialized")

    def save_case_snapshot(self, case_id: str, snapshot: Dict[str, Any]) -> bool:
        """Insert or update the stored snapshot of a case"""
        try:
            with self.SessionLocal() as session:
                record = session.get(CaseRecord, case_id)
                if record is None:
                    record = CaseRecord(case_id=case_id)
                    session.add(record)
                record.apply_snapshot(snapshot)
                session.commit()
                logger.debug(f"Saved snapshot {record.snapshot_count} for case {case_id}")
                return True
        except SQLAlchemyError as e:
            logger.error(f"Error saving snapshot for case {case_id}: {e}")
            return False

    def get_case_snapshot(self, case_id: str) -> Optional[Dict[str, Any]]:
        """Get the stored snapshot of a case"""
        try:
            with self.SessionLocal() as session:
                record = session.get(CaseRecord, case_id)
                if not record:
                    logger.warning(f"No stored snapshot for case {case_id}")
                    return None
                return record.to_dict()
        except SQLAlchemyError as e:
            logger.error(f"Error getting snapshot for case {case_id}: {e}")
            return None

    def list_cases(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """List stored cases, most recently updated first"""
        try:
            with self.SessionLocal() as session:
                query = session.query(CaseRecord)
                if status:
                    query = query.filter(CaseRecord.status == status)
                records = query.order_by(CaseRecord.updated_at.desc()).all()
                return [record.to_dict() for record in records]
        except SQLAlchemyError as e:
            logger.error(f"Error listing cases: {e}")
            return []
