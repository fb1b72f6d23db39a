"""
Ledger Transaction Model

Append-only record of completed pickups. Called "blockchain" in the
dashboards; there is no cryptographic chaining.
"""

from datetime import datetime
from wastechain.extensions import db
from wastechain.models.base import isoformat


class LedgerTransaction(db.Model):
    __tablename__ = 'ledger'
    
    id = db.Column(db.String(64), primary_key=True)
    bin_id = db.Column(db.String(32), nullable=False, index=True)
    action = db.Column(db.String(64), nullable=False)
    contractor_id = db.Column(db.String(64), nullable=False, default='system')
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    earnings = db.Column(db.Float, nullable=True)
    
    def to_dict(self):
        data = {
            'id': self.id,
            'binId': self.bin_id,
            'action': self.action,
            'contractorId': self.contractor_id,
            'timestamp': isoformat(self.timestamp),
        }
        if self.earnings is not None:
            data['earnings'] = self.earnings
        return data
    
    def __repr__(self):
        return f'<LedgerTransaction {self.id} {self.action} {self.bin_id}>'
