"""
Case Record Model for snapshot persistence
"""
from typing import Dict, Any
from sqlalchemy import Column, String, DateTime, Text, JSON, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class CaseRecord(Base):
    """
    Latest persisted snapshot of a dispute case
    """
    __tablename__ = "case_records"

    case_id = Column(String(64), primary_key=True)

    phase = Column(String(32), nullable=False, default="conversation")
    status = Column(String(50), nullable=False, default="waiting_for_customer")

    # Typed agent results, stored as validated JSON
    conversation_result = Column(JSON, nullable=True)
    sql_result = Column(JSON, nullable=True)
    sop_result = Column(JSON, nullable=True)
    decision_result = Column(JSON, nullable=True)
    resolution_result = Column(JSON, nullable=True)

    intake_transcript = Column(JSON, nullable=True)
    resolution_transcript = Column(JSON, nullable=True)

    last_error = Column(JSON, nullable=True)
    last_error_message = Column(Text, nullable=True)
    snapshot_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    SNAPSHOT_FIELDS = (
        'phase',
        'status',
        'conversation_result',
        'sql_result',
        'sop_result',
        'decision_result',
        'resolution_result',
        'intake_transcript',
        'resolution_transcript',
        'last_error',
    )

    def apply_snapshot(self, snapshot: Dict[str, Any]) -> None:
        for field in self.SNAPSHOT_FIELDS:
            setattr(self, field, snapshot.get(field))
        error = snapshot.get('last_error') or {}
        self.last_error_message = error.get('message')
        self.snapshot_count = (self.snapshot_count or 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        record = {field: getattr(self, field) for field in self.SNAPSHOT_FIELDS}
        record.update({
            "case_id": self.case_id,
            "snapshot_count": self.snapshot_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        })
        return record
