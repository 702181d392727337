"""
Order model — one row per purchased lead.

leadData is a point-in-time copy of the lead taken at checkout, so later edits
or deletes of the source lead never change a historical order. leadId is a
plain back-reference (no foreign key) and is never dereferenced for display.
"""
import uuid
from dataclasses import dataclass, asdict, fields

from sqlalchemy import Column, Float, Text, DateTime, JSON
from sqlalchemy.sql import func

from leadhub.database import Base


@dataclass(frozen=True)
class LeadSnapshot:
    """Displayable lead fields copied into an order at purchase time."""
    firstName: str = ''
    lastName: str = ''
    email: str = ''
    jobTitle: str = ''
    websiteName: str = ''
    websiteUrl: str = ''
    instagram: str = ''
    linkedin: str = ''
    industry: str = ''
    location: str = ''
    tiktok: str = ''
    founded: str = ''
    facebookPixel: str = ''

    @classmethod
    def from_lead(cls, lead):
        """Copy snapshot fields out of a canonical lead dict."""
        return cls(**{f.name: lead.get(f.name) or '' for f in fields(cls)})

    def to_dict(self):
        return asdict(self)


def _new_id():
    return uuid.uuid4().hex


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Text, primary_key=True, default=_new_id)
    user_id = Column('userId', Text, nullable=False, index=True)
    user_email = Column('userEmail', Text, default='')
    lead_id = Column('leadId', Text, nullable=False)
    lead_data = Column('leadData', JSON, nullable=False, default=dict)
    price = Column(Float, nullable=False, default=0.0)
    status = Column(Text, nullable=False, default='pending')
    purchased_at = Column('purchasedAt', DateTime(timezone=True), server_default=func.now(), index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'userEmail': self.user_email,
            'leadId': self.lead_id,
            'leadData': dict(self.lead_data or {}),
            'price': self.price or 0.0,
            'status': self.status,
            'purchasedAt': self.purchased_at.isoformat() if self.purchased_at else None,
        }
