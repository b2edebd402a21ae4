from datetime import datetime, timedelta

import pytest

from repairdesk.utils.lifecycle import (RepairStatus, LifecycleError, VALID_TRANSITIONS,
                                        apply_transition, describe_status, initial_state,
                                        parse_status)

NOW = datetime(2024, 5, 1, 12, 0, 0)


def test_initial_state_is_pending_without_timestamps():
    state = initial_state()
    assert state.status is RepairStatus.PENDING
    assert state.ready_at is None
    assert state.archived_at is None


def test_every_status_reaches_every_other_status():
    for current, targets in VALID_TRANSITIONS.items():
        assert set(targets) == set(RepairStatus) - {current}


def test_ready_stamps_ready_at():
    result = apply_transition('In Progress', 'Ready', NOW)
    assert result.status is RepairStatus.READY
    assert result.ready_at == NOW


def test_leaving_ready_clears_ready_at():
    result = apply_transition(RepairStatus.READY, RepairStatus.IN_PROGRESS, NOW)
    assert result.ready_at is None


def test_archiving_stamps_archived_at_and_clears_ready_at():
    result = apply_transition('Ready', 'Archived', NOW)
    assert result.status is RepairStatus.ARCHIVED
    assert result.archived_at == NOW
    assert result.ready_at is None


def test_unarchiving_keeps_archived_at():
    earlier = NOW - timedelta(days=3)
    result = apply_transition('Archived', 'Pending', NOW, archived_at=earlier)
    assert result.status is RepairStatus.PENDING
    assert result.archived_at == earlier


def test_rearchiving_restamps_archived_at():
    earlier = NOW - timedelta(days=3)
    result = apply_transition('In Progress', 'Archived', NOW, archived_at=earlier)
    assert result.archived_at == NOW


def test_same_status_is_rejected():
    with pytest.raises(LifecycleError):
        apply_transition('Pending', 'Pending', NOW)


def test_unknown_status_is_rejected():
    with pytest.raises(LifecycleError):
        parse_status('Shipped')


def test_describe_status():
    assert describe_status('Ready') == 'Your device is repaired and ready for pickup!'
    assert describe_status('Shipped') == 'The status of your repair is unknown.'
