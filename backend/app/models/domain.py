from sqlalchemy import Column, String, DateTime
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Domain(Base):
    """A named resource with an access privilege tag"""
    __tablename__ = "domains"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    # Uniqueness follows the database collation
    name = Column(String(255), unique=True, index=True, nullable=False)
    # Free text; the UI offers a fixed set (see PRIVILEGE_OPTIONS in app.schemas.domain)
    privilege = Column(String(255), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Domain {self.name} ({self.privilege})>"
