import pytest

from wastechain import repositories
from wastechain.errors import ValidationError, NotFound
from wastechain.models import Activity, LedgerTransaction, Report
from wastechain.services.classifier import EMPTY, NORMAL, FULL, HAZARD
from wastechain.services.pickups import (
    process_pickup, record_transaction, list_transactions, PICKUP_EARNINGS,
)


@pytest.fixture()
def contractor(make_contractor):
    return make_contractor('contractor-1', 'Green Haulers', todays_earnings=100.0, completed_pickups=4)


def test_collect_full_bin(contractor, make_bin, make_citizen, make_report):
    make_bin('BIN003', 85, 2, status=FULL)
    make_citizen('citizen-1')
    make_citizen('citizen-2')
    make_report('report-1', 'citizen-1', 'BIN003')
    make_report('report-2', 'citizen-2', 'BIN003', points_awarded=0)

    result = process_pickup('contractor-1', 'BIN003', 'Collected')

    assert result['success'] is True
    assert result['bin']['status'] == EMPTY
    assert result['bin']['fillLevel'] == 0
    assert result['earnings'] == PICKUP_EARNINGS
    assert result['totalEarnings'] == 125.0
    assert result['transaction']['earnings'] == PICKUP_EARNINGS
    assert result['transaction']['contractorId'] == 'contractor-1'

    updated = repositories.contractors.find_by_id('contractor-1')
    assert updated.todays_earnings == 125.0
    assert updated.completed_pickups == 5
    assert updated.weekly_pickups_completed == 5

    for report in Report.query.all():
        assert report.status == 'resolved'
        assert report.resolved_at is not None

    tx = LedgerTransaction.query.one()
    assert (tx.bin_id, tx.action) == ('BIN003', 'Collected')
    activity = Activity.query.one()
    assert activity.type == 'success'
    assert activity.user == 'Green Haulers'
    assert activity.message == 'Contractor Green Haulers collected BIN003. Earned $25.00'


def test_hazard_resolved_keeps_fill_level(contractor, make_bin, make_citizen, make_report):
    make_bin('BIN002', 60, 5, status=HAZARD)
    make_citizen()
    make_report('report-1', 'citizen-1', 'BIN002')

    result = process_pickup('contractor-1', 'BIN002', 'Hazard_Resolved')

    assert result['bin']['status'] == NORMAL
    assert result['bin']['fillLevel'] == 60
    assert repositories.reports.find_by_id('report-1').status == 'resolved'


def test_other_action_leaves_status_and_reports(contractor, make_bin, make_citizen, make_report):
    make_bin('BIN001', 85, 2, status=FULL)
    make_citizen()
    make_report('report-1', 'citizen-1', 'BIN001')

    result = process_pickup('contractor-1', 'BIN001', 'Inspected')

    assert result['bin']['status'] == FULL
    assert result['earnings'] == PICKUP_EARNINGS
    assert repositories.reports.find_by_id('report-1').status == 'pending'


def test_each_pickup_pays_once(contractor, make_bin):
    make_bin('BIN001', 85, 2)
    make_bin('BIN002', 90, 1)

    process_pickup('contractor-1', 'BIN001')
    result = process_pickup('contractor-1', 'BIN002')

    assert result['totalEarnings'] == 150.0
    assert repositories.contractors.find_by_id('contractor-1').completed_pickups == 6
    assert LedgerTransaction.query.count() == 2


def test_pickup_errors(contractor, make_bin):
    with pytest.raises(ValidationError):
        process_pickup('contractor-1', None)
    with pytest.raises(NotFound) as exc:
        process_pickup('contractor-404', 'BIN001')
    assert exc.value.message == 'Contractor not found'
    with pytest.raises(NotFound) as exc:
        process_pickup('contractor-1', 'BIN404')
    assert exc.value.message == 'Bin not found'
    assert LedgerTransaction.query.count() == 0


def test_record_transaction_defaults_to_system():
    tx = record_transaction('BIN001', 'Inspected')
    assert tx.contractor_id == 'system'
    assert tx.id.startswith('TX-')
    assert 'earnings' not in tx.to_dict()
    with pytest.raises(ValidationError):
        record_transaction('', 'Collected')


def test_pickup_endpoints(client, contractor, make_bin):
    make_bin('BIN001', 85, 2)
    make_bin('BIN002', 82, 1)

    r = client.post('/api/pickups', json={'contractorId': 'contractor-1', 'binId': 'BIN001'})
    assert r.status_code == 200
    assert r.get_json()['bin']['status'] == EMPTY

    r = client.post('/api/contractors/contractor-1/pickup', json={'binId': 'BIN002', 'action': 'Collected'})
    assert r.status_code == 200
    assert r.get_json()['totalEarnings'] == 150.0

    r = client.post('/api/pickups', json={'contractorId': 'contractor-1'})
    assert r.status_code == 400
    r = client.post('/api/pickups', json={'contractorId': 'contractor-1', 'binId': 'BIN404'})
    assert r.status_code == 404

    r = client.get('/api/ledger')
    assert [tx['binId'] for tx in r.get_json()] == ['BIN002', 'BIN001']


def test_ledger_endpoint(client):
    r = client.post('/api/ledger', json={'binId': 'BIN001', 'action': 'Inspected', 'contractorId': 'contractor-9'})
    assert r.status_code == 201
    assert r.get_json()['contractorId'] == 'contractor-9'

    r = client.post('/api/ledger', json={'binId': 'BIN001'})
    assert r.status_code == 400

    assert len(list_transactions()) == 1
