"""
Default Data

Demo bins and accounts created on first start.
"""

import logging
import random
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from wastechain.extensions import db
from wastechain.models import Bin, Citizen, Contractor
from wastechain.services.classifier import classify

logger = logging.getLogger(__name__)

# (id, location, fill range, gas range)
DEFAULT_BINS = [
    ('BIN001', 'Sector 5, Jaipur', (30, 69), (1, 2)),
    ('BIN002', 'Vaishali Nagar, Jaipur', (80, 94), (3, 4)),
    ('BIN003', 'Malviya Nagar, Jaipur', (0, 19), (1, 1)),
    ('BIN004', 'C-Scheme, Jaipur', (50, 79), (2, 3)),
    ('BIN005', 'Raja Park, Jaipur', (10, 34), (1, 1)),
]


def ensure_default_data(rng=random):
    """Ensure default bins, the demo citizen and the demo contractor exist."""
    now = datetime.utcnow()
    
    if not Bin.query.first():
        for bin_id, location, fill_range, gas_range in DEFAULT_BINS:
            fill_level = rng.randint(*fill_range)
            gas_level = rng.randint(*gas_range)
            db.session.add(Bin(
                id=bin_id,
                location=location,
                fill_level=fill_level,
                gas_level=gas_level,
                status=classify(fill_level, gas_level),
                last_updated=now,
            ))
        logger.info('Created %d default bins', len(DEFAULT_BINS))
    
    if not Citizen.query.first():
        db.session.add(Citizen(
            id='citizen-1',
            name='Demo Citizen',
            email='citizen@example.com',
            points=1250,
            reports_submitted=8,
            co2_saved=12.5,
            waste_disposed=45,
            recycling_rate=78,
            created_at=now,
        ))
    
    if not Contractor.query.first():
        db.session.add(Contractor(
            id='contractor-1',
            name='Demo Contractor',
            email='contractor@example.com',
            todays_earnings=245.50,
            completed_pickups=8,
            weekly_pickups_completed=47,
            weekly_total_earnings=1175.00,
            efficiency_rating=4.8,
            on_time_rate=96,
            created_at=now,
        ))
    
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
