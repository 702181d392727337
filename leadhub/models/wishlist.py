"""
WishlistEntry model — (user, lead) bookmark pairs.
"""
from sqlalchemy import Column, Integer, Text, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from leadhub.database import Base


class WishlistEntry(Base):
    __tablename__ = 'wishlist'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column('userId', Text, nullable=False, index=True)
    lead_id = Column('leadId', Text, nullable=False)
    created_at = Column('createdAt', DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('userId', 'leadId', name='uq_wishlist_user_lead'),
    )
