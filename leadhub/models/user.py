"""
UserProfile model — account metadata keyed by the auth provider's uid.
"""
from sqlalchemy import Column, Text, DateTime, JSON
from sqlalchemy.sql import func

from leadhub.database import Base


class UserProfile(Base):
    __tablename__ = 'users'

    uid = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, default='')
    display_name = Column('displayName', Text, default='')
    role = Column(Text, nullable=False, default='customer')
    company_name = Column('companyName', Text, nullable=True)
    job_title = Column('jobTitle', Text, nullable=True)
    website = Column(Text, nullable=True)
    professional_interests = Column('professionalInterests', JSON, default=list)
    alert_preferences = Column('alertPreferences', JSON, nullable=True)
    created_at = Column('createdAt', DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            'uid': self.uid,
            'email': self.email,
            'displayName': self.display_name or '',
            'role': self.role,
            'companyName': self.company_name,
            'jobTitle': self.job_title,
            'website': self.website,
            'professionalInterests': self.professional_interests or [],
            'alertPreferences': self.alert_preferences or {
                'enabled': False, 'industries': [], 'locations': [],
            },
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
