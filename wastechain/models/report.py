"""
Report Model
"""

from datetime import datetime
from wastechain.extensions import db
from wastechain.models.base import isoformat

PENDING = 'pending'
INVESTIGATING = 'investigating'
RESOLVED = 'resolved'

REPORT_STATUSES = (PENDING, INVESTIGATING, RESOLVED)
OPEN_STATUSES = (PENDING, INVESTIGATING)


class Report(db.Model):
    """Citizen-submitted issue report for a bin"""
    __tablename__ = 'reports'
    
    id = db.Column(db.String(64), primary_key=True)
    citizen_id = db.Column(db.String(64), db.ForeignKey('citizens.id'), nullable=False, index=True)
    bin_id = db.Column(db.String(32), nullable=False, index=True)
    issue_type = db.Column(db.String(64), nullable=False)
    description = db.Column(db.String(500), default='')
    status = db.Column(db.String(16), nullable=False, default=PENDING)
    points_awarded = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    resolved_at = db.Column(db.DateTime, nullable=True)
    
    @property
    def is_open(self):
        return self.status in OPEN_STATUSES
    
    def to_dict(self):
        data = {
            'id': self.id,
            'citizenId': self.citizen_id,
            'binId': self.bin_id,
            'issueType': self.issue_type,
            'description': self.description or '',
            'status': self.status,
            'pointsAwarded': self.points_awarded,
            'createdAt': isoformat(self.created_at),
        }
        if self.resolved_at is not None:
            data['resolvedAt'] = isoformat(self.resolved_at)
        return data
    
    def __repr__(self):
        return f'<Report {self.id} bin:{self.bin_id} {self.status}>'
