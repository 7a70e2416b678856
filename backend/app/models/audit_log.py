from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class AuditLog(Base):
    """Append-only activity log of mutations performed through the panel"""
    __tablename__ = "audit_logs"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    # Null when the action was performed by the system itself (seeders, scripts)
    causer_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # e.g. 'created', 'updated', 'deleted', 'backup_run'
    description = Column(String(255), nullable=False)
    # e.g. 'Domain', 'Storage', 'Role', 'Backup'
    subject_type = Column(String(100), nullable=True, index=True)
    subject_id = Column(String(255), nullable=True)

    # New values on create, {"old": ..., "new": ...} per field on update
    properties = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    causer = relationship("User", foreign_keys=[causer_id], lazy="joined")

    @property
    def causer_name(self) -> str:
        return self.causer.name if self.causer else "system"

    def __repr__(self):
        return f"<AuditLog {self.description} {self.subject_type} by {self.causer_id or 'system'}>"
