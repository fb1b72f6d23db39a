"""
Bin Model
"""

from datetime import datetime
from wastechain.extensions import db
from wastechain.models.base import SerializerMixin, isoformat


class Bin(SerializerMixin, db.Model):
    """A monitored waste receptacle with fill and gas sensor readings"""
    __tablename__ = 'bins'
    
    API_FIELDS = {
        'location': 'location',
        'fillLevel': 'fill_level',
        'gasLevel': 'gas_level',
        'status': 'status',
    }
    
    id = db.Column(db.String(32), primary_key=True)
    location = db.Column(db.String(255), nullable=False)
    fill_level = db.Column(db.Integer, nullable=False, default=0)  # 0-100 %
    gas_level = db.Column(db.Integer, nullable=False, default=1)  # 1-5
    status = db.Column(db.String(16), nullable=False, default='Empty')
    last_updated = db.Column(db.DateTime, default=datetime.utcnow)
    
    def to_dict(self):
        return {
            'id': self.id,
            'location': self.location,
            'fillLevel': self.fill_level,
            'gasLevel': self.gas_level,
            'status': self.status,
            'lastUpdated': isoformat(self.last_updated),
        }
    
    def __repr__(self):
        return f'<Bin {self.id} {self.status} {self.fill_level}%>'
