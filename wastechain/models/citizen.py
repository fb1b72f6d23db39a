"""
Citizen Model
"""

from datetime import datetime
from wastechain.extensions import db
from wastechain.models.base import SerializerMixin, isoformat


class Citizen(SerializerMixin, db.Model):
    """Citizen account earning points for bin reports"""
    __tablename__ = 'citizens'
    
    API_FIELDS = {
        'name': 'name',
        'email': 'email',
        'points': 'points',
        'reportsSubmitted': 'reports_submitted',
    }
    NESTED_FIELDS = {
        'environmentalImpact': {
            'co2Saved': 'co2_saved',
            'wasteDisposed': 'waste_disposed',
            'recyclingRate': 'recycling_rate',
        },
    }
    
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False, index=True)
    points = db.Column(db.Integer, nullable=False, default=0)
    reports_submitted = db.Column(db.Integer, nullable=False, default=0)
    
    # Environmental impact
    co2_saved = db.Column(db.Float, default=0.0)  # kg
    waste_disposed = db.Column(db.Float, default=0.0)  # kg
    recycling_rate = db.Column(db.Float, default=0.0)  # %
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    
    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'points': self.points,
            'reportsSubmitted': self.reports_submitted,
            'environmentalImpact': {
                'co2Saved': self.co2_saved,
                'wasteDisposed': self.waste_disposed,
                'recyclingRate': self.recycling_rate,
            },
            'createdAt': isoformat(self.created_at),
        }
    
    def __repr__(self):
        return f'<Citizen {self.name}>'
