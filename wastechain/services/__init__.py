"""
Services Package

Exports all services for easy importing.
"""

from wastechain.services.classifier import classify
from wastechain.services.activity import log_activity, recent_activities
from wastechain.services.simulation import IoTSimulationEngine
from wastechain.services.scheduler import SimulationScheduler
from wastechain.services.reports import submit_report, resolve_open_reports, update_report_status, list_reports
from wastechain.services.pickups import process_pickup, record_transaction, list_transactions
from wastechain.services.seed import ensure_default_data

__all__ = [
    'classify',
    'log_activity',
    'recent_activities',
    'IoTSimulationEngine',
    'SimulationScheduler',
    'submit_report',
    'resolve_open_reports',
    'update_report_status',
    'list_reports',
    'process_pickup',
    'record_transaction',
    'list_transactions',
    'ensure_default_data',
]
