"""
Contractor Model
"""

from datetime import datetime
from wastechain.extensions import db
from wastechain.models.base import SerializerMixin, isoformat


class Contractor(SerializerMixin, db.Model):
    """Waste-collection contractor paid per confirmed pickup"""
    __tablename__ = 'contractors'
    
    API_FIELDS = {
        'name': 'name',
        'email': 'email',
        'todaysEarnings': 'todays_earnings',
        'completedPickups': 'completed_pickups',
    }
    NESTED_FIELDS = {
        'weeklyStats': {
            'pickupsCompleted': 'weekly_pickups_completed',
            'totalEarnings': 'weekly_total_earnings',
            'efficiencyRating': 'efficiency_rating',
            'onTimeRate': 'on_time_rate',
        },
    }
    
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    todays_earnings = db.Column(db.Float, nullable=False, default=0.0)
    completed_pickups = db.Column(db.Integer, nullable=False, default=0)
    
    # Weekly stats
    weekly_pickups_completed = db.Column(db.Integer, nullable=False, default=0)
    weekly_total_earnings = db.Column(db.Float, nullable=False, default=0.0)
    efficiency_rating = db.Column(db.Float, default=5.0)
    on_time_rate = db.Column(db.Float, default=100.0)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    
    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'todaysEarnings': self.todays_earnings,
            'completedPickups': self.completed_pickups,
            'weeklyStats': {
                'pickupsCompleted': self.weekly_pickups_completed,
                'totalEarnings': self.weekly_total_earnings,
                'efficiencyRating': self.efficiency_rating,
                'onTimeRate': self.on_time_rate,
            },
            'createdAt': isoformat(self.created_at),
        }
    
    def __repr__(self):
        return f'<Contractor {self.name}>'
