"""
Lead model — one row per purchasable business contact.

Column names keep the camelCase field names of the stored lead records so
existing data and API payloads line up field for field. Older records may
carry the legacy `name` / `company` columns instead of firstName / websiteName;
canonicalize() folds those in once, at read time.
"""
import math
import uuid

from sqlalchemy import Column, Float, Text, DateTime
from sqlalchemy.sql import func

from leadhub.config import DEFAULT_INDUSTRY, LEAD_STATUSES
from leadhub.database import Base


# Displayable string fields, in wire order
LEAD_FIELDS = [
    'websiteName',
    'websiteUrl',
    'firstName',
    'lastName',
    'jobTitle',
    'email',
    'instagram',
    'linkedin',
    'industry',
    'location',
    'tiktok',
    'founded',
    'facebookPixel',
]

# Legacy column → canonical field it stands in for
LEGACY_FALLBACKS = {
    'name': 'firstName',
    'company': 'websiteName',
}


def _new_id():
    return uuid.uuid4().hex


class Lead(Base):
    __tablename__ = 'leads'

    id = Column(Text, primary_key=True, default=_new_id)
    website_name = Column('websiteName', Text, default='')
    website_url = Column('websiteUrl', Text, default='')
    first_name = Column('firstName', Text, default='')
    last_name = Column('lastName', Text, default='')
    job_title = Column('jobTitle', Text, default='')
    email = Column(Text, default='')
    instagram = Column(Text, default='')
    linkedin = Column(Text, default='')
    industry = Column(Text, default=DEFAULT_INDUSTRY, index=True)
    location = Column(Text, default='')
    tiktok = Column(Text, default='')
    founded = Column(Text, default='')
    facebook_pixel = Column('facebookPixel', Text, default='')
    price = Column(Float, nullable=False, default=0.0)
    status = Column(Text, nullable=False, default='available', index=True)
    created_at = Column('createdAt', DateTime(timezone=True), server_default=func.now(), index=True)

    # Legacy fields (pre-import-format records)
    name = Column(Text, nullable=True)
    company = Column(Text, nullable=True)

    def raw_dict(self):
        """Column values keyed by their stored (camelCase) names."""
        return {col.name: getattr(self, attr.key)
                for attr in self.__mapper__.column_attrs
                for col in attr.columns}

    def to_dict(self):
        return canonicalize(self.raw_dict())

    @classmethod
    def from_record(cls, record):
        """Build a Lead from a camelCase record dict (only known fields are read)."""
        return cls(
            website_name=record.get('websiteName', ''),
            website_url=record.get('websiteUrl', ''),
            first_name=record.get('firstName', ''),
            last_name=record.get('lastName', ''),
            job_title=record.get('jobTitle', ''),
            email=record.get('email', ''),
            instagram=record.get('instagram', ''),
            linkedin=record.get('linkedin', ''),
            industry=record.get('industry') or DEFAULT_INDUSTRY,
            location=record.get('location', ''),
            tiktok=record.get('tiktok', ''),
            founded=record.get('founded', ''),
            facebook_pixel=record.get('facebookPixel', ''),
            price=record.get('price', 0.0),
            status=record.get('status', 'available'),
        )


def _clean_price(value):
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def canonicalize(raw):
    """
    Normalize a stored lead record (possibly legacy-shaped) into the canonical Lead shape.

    Pure: never mutates `raw`. Legacy `name` / `company` are used only when the
    canonical field is empty, and are not carried into the output.
    """
    lead = {'id': raw.get('id')}
    for field in LEAD_FIELDS:
        value = raw.get(field)
        lead[field] = '' if value is None else str(value)

    for legacy, field in LEGACY_FALLBACKS.items():
        if not lead[field] and raw.get(legacy):
            lead[field] = str(raw[legacy])

    lead['industry'] = lead['industry'] or DEFAULT_INDUSTRY
    lead['price'] = _clean_price(raw.get('price'))
    status = raw.get('status')
    lead['status'] = status if status in LEAD_STATUSES else 'available'

    created_at = raw.get('createdAt')
    lead['createdAt'] = created_at.isoformat() if hasattr(created_at, 'isoformat') else created_at
    return lead
