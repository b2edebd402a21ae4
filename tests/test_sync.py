import pytest

from repairdesk import db
from repairdesk.models import Customer
from repairdesk.services.customers import create_customer
from repairdesk.services.staff import delete_technician, reset_password
from repairdesk.sync import (COLLECTIONS, SessionState, SnapshotHub, collections_for,
                             load_snapshot, serialize_snapshot)


def test_subscription_is_primed_with_every_collection():
    hub = SnapshotHub()
    subscription = hub.subscribe(['repairs', 'customers'])
    assert subscription.drain() == ['repairs', 'customers']
    assert subscription.drain() == []


def test_repeated_changes_coalesce():
    hub = SnapshotHub()
    subscription = hub.subscribe(['repairs'])
    subscription.drain()
    hub.publish(['repairs'])
    hub.publish(['repairs', 'admins'])
    assert subscription.drain() == ['repairs']


def test_unsubscribe_stops_delivery():
    hub = SnapshotHub()
    with hub.subscribe() as subscription:
        assert hub.subscriber_count == 1
        subscription.drain()
    assert hub.subscriber_count == 0
    hub.publish(COLLECTIONS)
    assert subscription.drain() == []


def test_unknown_collection_is_rejected():
    with pytest.raises(ValueError):
        SnapshotHub().subscribe(['invoices'])


def test_wait_times_out_empty():
    subscription = SnapshotHub().subscribe(['donations'])
    assert subscription.wait(timeout=0.1) == ['donations']
    assert subscription.wait(timeout=0.05) == []


def test_commit_publishes_changed_collection(hub):
    subscription = hub.subscribe(['customers', 'repairs'])
    subscription.drain()
    create_customer('Ann Lee', 'ann@example.com')
    assert subscription.drain() == ['customers']


def test_rollback_publishes_nothing(hub):
    subscription = hub.subscribe(['customers'])
    subscription.drain()
    db.session.add(Customer(full_name='Ghost', email='ghost@example.com'))
    db.session.flush()
    db.session.rollback()
    assert subscription.drain() == []
    assert Customer.query.count() == 0


def test_repairs_snapshot_newest_first(make_repair):
    first = make_repair(model='first')
    second = make_repair(model='second')
    assert [r.id for r in load_snapshot('repairs')] == [second.id, first.id]


def test_unknown_snapshot():
    with pytest.raises(KeyError):
        load_snapshot('invoices')


def test_student_never_sees_admins(admin, technician):
    assert 'admins' in collections_for(admin)
    assert 'admins' not in collections_for(technician)
    assert collections_for(None) == ()


def test_session_state_filters_and_notifies(hub, make_repair, admin, technician, other_technician):
    mine = make_repair(assigned_to=technician)
    make_repair(assigned_to=other_technician)

    state = SessionState(hub, technician)
    seen = []
    stop = state.subscribe(lambda name, snapshot: seen.append(name))

    reloaded = state.refresh()
    assert 'admins' not in reloaded
    assert [r['id'] for r in state.collections['repairs']] == [mine.id]
    assert set(seen) == set(reloaded)
    assert state.identity.email == 'sam@example.com'

    stop()
    make_repair(assigned_to=technician, model='another')
    assert state.refresh() == ['repairs']
    assert len(state.collections['repairs']) == 2
    assert set(seen) == set(reloaded)

    state.close()
    assert state.identity is None
    assert hub.subscriber_count == 0


def test_admin_session_state_gets_everything(hub, make_repair, admin):
    make_repair()
    state = SessionState(hub, admin)
    assert set(state.refresh()) == set(COLLECTIONS)
    assert state.collections['admins'] == serialize_snapshot('admins')
    state.close()


def test_session_state_stops_for_deleted_account(hub, make_repair, technician):
    state = SessionState(hub, technician)
    state.refresh()

    delete_technician(technician)
    make_repair()
    assert state.refresh() == []
    assert state.identity is None
    assert not state.active
    assert hub.subscriber_count == 0


def test_session_state_stops_after_password_reset(hub, technician):
    state = SessionState(hub, technician)
    state.refresh()

    reset_password(technician)
    assert state.wait(timeout=0.05) == []
    assert not state.active


def test_idle_wait_picks_up_commits_from_another_worker(admin):
    # A hub no commit in this process publishes to
    other_worker = SnapshotHub()
    state = SessionState(other_worker, admin)
    state.refresh()

    create_customer('Ann Lee', 'ann@example.com')
    assert state.wait(timeout=0.05) == ['customers']
    assert [c['fullName'] for c in state.collections['customers']] == ['Ann Lee']
    assert state.wait(timeout=0.05) == []
    state.close()
