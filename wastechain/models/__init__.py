"""
Models Package

Exports all models for easy importing.
"""

from wastechain.models.bin import Bin
from wastechain.models.activity import Activity, ACTIVITY_TYPES
from wastechain.models.report import Report, REPORT_STATUSES, OPEN_STATUSES
from wastechain.models.citizen import Citizen
from wastechain.models.contractor import Contractor
from wastechain.models.ledger import LedgerTransaction

__all__ = [
    'Bin',
    'Activity',
    'Report',
    'Citizen',
    'Contractor',
    'LedgerTransaction',
    'ACTIVITY_TYPES',
    'REPORT_STATUSES',
    'OPEN_STATUSES',
]
