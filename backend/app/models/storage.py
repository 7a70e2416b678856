from sqlalchemy import Column, Integer, DateTime, CheckConstraint
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class StoragePlan(Base):
    """A priced capacity tier; size in GB, prices in whole currency units"""
    __tablename__ = "storages"
    __table_args__ = (
        CheckConstraint("size >= 1", name="ck_storages_size_positive"),
        CheckConstraint(
            "price_admin_annual >= 0 AND price_admin_monthly >= 0 "
            "AND price_member_annual >= 0 AND price_member_monthly >= 0",
            name="ck_storages_prices_non_negative",
        ),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    size = Column(Integer, unique=True, index=True, nullable=False)

    price_admin_annual = Column(Integer, nullable=False, default=0)
    price_admin_monthly = Column(Integer, nullable=False, default=0)
    price_member_annual = Column(Integer, nullable=False, default=0)
    price_member_monthly = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<StoragePlan {self.size}GB>"
