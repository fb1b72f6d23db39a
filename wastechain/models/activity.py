"""
Activity Model
"""

from datetime import datetime
from wastechain.extensions import db
from wastechain.models.base import isoformat

ACTIVITY_TYPES = ('success', 'warning', 'error', 'info')


class Activity(db.Model):
    """Append-only event shown in the dashboards' activity feeds"""
    __tablename__ = 'activities'
    
    id = db.Column(db.String(64), primary_key=True)
    type = db.Column(db.String(16), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    user = db.Column(db.String(120), nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    
    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'message': self.message,
            'user': self.user,
            'timestamp': isoformat(self.timestamp),
        }
    
    def __repr__(self):
        return f'<Activity {self.type}: {self.message[:40]}>'
