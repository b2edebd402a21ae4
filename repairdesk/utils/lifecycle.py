"""
Repair ticket lifecycle.

A ticket moves between four statuses. The status selector in the UI is free
choice, so every status can be reached from every other one, but a move is
always computed here so the timestamp side effects stay in one place:

    * Ready stamps ``ready_at``; any other status clears it (Archived too).
    * Archived stamps ``archived_at``; nothing ever clears it afterwards.
"""
from collections import namedtuple
from enum import Enum


class RepairStatus(str, Enum):
    PENDING = 'Pending'
    IN_PROGRESS = 'In Progress'
    READY = 'Ready'
    ARCHIVED = 'Archived'


# Assignee placeholder used by the intake form until a technician is picked
UNASSIGNED = 'To Be Determined'

VALID_TRANSITIONS = {
    RepairStatus.PENDING: [RepairStatus.IN_PROGRESS, RepairStatus.READY, RepairStatus.ARCHIVED],
    RepairStatus.IN_PROGRESS: [RepairStatus.PENDING, RepairStatus.READY, RepairStatus.ARCHIVED],
    RepairStatus.READY: [RepairStatus.PENDING, RepairStatus.IN_PROGRESS, RepairStatus.ARCHIVED],
    RepairStatus.ARCHIVED: [RepairStatus.PENDING, RepairStatus.IN_PROGRESS, RepairStatus.READY],
}

STATUS_DESCRIPTIONS = {
    RepairStatus.PENDING: 'Your repair request has been received and is waiting to be assigned.',
    RepairStatus.IN_PROGRESS: 'A technician is currently working on your device.',
    RepairStatus.READY: 'Your device is repaired and ready for pickup!',
    RepairStatus.ARCHIVED: 'This repair has been completed and archived.',
}

Transition = namedtuple('Transition', ['status', 'ready_at', 'archived_at'])


class LifecycleError(ValueError):
    pass


def parse_status(value):
    """Accept a RepairStatus or its display string"""
    if isinstance(value, RepairStatus):
        return value
    try:
        return RepairStatus(value)
    except ValueError:
        raise LifecycleError(f'Unknown repair status: {value!r}')


def initial_state():
    return Transition(RepairStatus.PENDING, None, None)


def apply_transition(current, target, now, archived_at=None):
    """Compute the status and timestamps a ticket ends up with.

    ``archived_at`` is the ticket's existing archive stamp; it is carried over
    unless the ticket is being archived (again), in which case ``now`` wins.
    """
    current = parse_status(current)
    target = parse_status(target)

    if target not in VALID_TRANSITIONS[current]:
        raise LifecycleError(f'Repair is already {current.value}')

    ready_at = now if target is RepairStatus.READY else None
    if target is RepairStatus.ARCHIVED:
        archived_at = now

    return Transition(target, ready_at, archived_at)


def describe_status(value):
    try:
        return STATUS_DESCRIPTIONS[parse_status(value)]
    except LifecycleError:
        return 'The status of your repair is unknown.'
