"""
Admin Services

Aggregate statistics for the admin dashboard.
"""

from datetime import datetime, timedelta

from wastechain.models import Bin, Activity, Citizen, Contractor, LedgerTransaction
from wastechain.services.classifier import EMPTY, NORMAL, FULL, HAZARD
from wastechain.services.pickups import COLLECTED


def _collections_since(transactions, cutoff):
    return sum(1 for tx in transactions if tx.action == COLLECTED and tx.timestamp >= cutoff)


def compute_analytics(now=None):
    """Compute bin, account and collection statistics."""
    now = now or datetime.utcnow()
    bins = Bin.query.all()
    transactions = LedgerTransaction.query.all()
    
    status_counts = {EMPTY: 0, NORMAL: 0, FULL: 0, HAZARD: 0}
    for b in bins:
        if b.status in status_counts:
            status_counts[b.status] += 1
    
    avg_fill_level = round(sum(b.fill_level for b in bins) / len(bins)) if bins else 0
    
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    
    return {
        'totalBins': len(bins),
        'fullBins': status_counts[FULL],
        'normalBins': status_counts[NORMAL],
        'emptyBins': status_counts[EMPTY],
        'hazardBins': status_counts[HAZARD],
        'avgFillLevel': avg_fill_level,
        'totalTransactions': len(transactions),
        'totalCitizens': Citizen.query.count(),
        'totalContractors': Contractor.query.count(),
        'totalActivities': Activity.query.count(),
        'todayCollections': _collections_since(transactions, today_start),
        'weeklyCollections': _collections_since(transactions, now - timedelta(days=7)),
        'monthlyCollections': _collections_since(transactions, now - timedelta(days=30)),
    }
