"""
Donation request lifecycle.

``pending`` is the initial status; ``done`` and ``canceled`` are terminal.
Every check runs before any field is touched, so a rejected transition
leaves the record exactly as it was.
"""
import logging

from .exceptions import Forbidden, InvalidInput, InvalidTransition
from .roles import Role

logger = logging.getLogger(__name__)

PENDING = 'pending'
IN_PROGRESS = 'inprogress'
DONE = 'done'
CANCELED = 'canceled'

STATUS_CHOICES = [
    (PENDING, 'Pending'),
    (IN_PROGRESS, 'In progress'),
    (DONE, 'Done'),
    (CANCELED, 'Canceled'),
]
STATUSES = frozenset(value for value, _ in STATUS_CHOICES)
TERMINAL_STATUSES = frozenset({DONE, CANCELED})

# (from, to) -> roles allowed to make the move. Donors additionally
# have to own the request.
TRANSITIONS = {
    (PENDING, IN_PROGRESS): frozenset({Role.ADMIN}),
    (IN_PROGRESS, DONE): frozenset({Role.ADMIN, Role.VOLUNTEER, Role.DONOR}),
    (IN_PROGRESS, CANCELED): frozenset({Role.ADMIN, Role.VOLUNTEER, Role.DONOR}),
}

# Set once at creation, or only through a transition.
IMMUTABLE_FIELDS = (
    'id',
    'requester_email',
    'requester_name',
    'status',
    'donor_name',
    'donor_email',
    'created_at',
    'updated_at',
)


def permitted_changes(data):
    """Drop immutable fields from an update payload instead of failing."""
    return {key: value for key, value in data.items() if key not in IMMUTABLE_FIELDS}


def check_transition(current, target, role, is_owner):
    if target not in STATUSES:
        raise InvalidInput(f"Unknown status: {target!r}")

    role = Role(role)
    if role == Role.DONOR and not is_owner:
        raise Forbidden('Donors can only change the status of their own requests.')

    allowed = TRANSITIONS.get((current, target))
    if allowed is None:
        if current in TERMINAL_STATUSES:
            raise InvalidTransition(f"Request is already {current}.")
        raise InvalidTransition(f"Cannot move a request from {current} to {target}.")

    if role not in allowed:
        raise Forbidden(f"A {role.value} cannot move a request from {current} to {target}.")


def apply_transition(donation_request, role, email, target, donor_name=None, donor_email=None):
    """
    Move ``donation_request`` to ``target`` on behalf of a caller.

    The caller is identified by ``role`` and ``email``. ``donor_name`` and
    ``donor_email`` assign a donor, which is only possible when moving a
    pending request to inprogress. The request is saved and returned.
    """
    current = donation_request.status
    is_owner = donation_request.requester_email == email
    try:
        check_transition(current, target, role, is_owner)
    except (Forbidden, InvalidTransition):
        logger.warning(
            "Rejected transition of request %s from %s to %s by %s",
            donation_request.pk, current, target, email,
        )
        raise

    donation_request.status = target
    if (current, target) == (PENDING, IN_PROGRESS):
        if donor_name is not None:
            donation_request.donor_name = donor_name
        if donor_email is not None:
            donation_request.donor_email = donor_email
    donation_request.save()

    logger.info("Request %s moved from %s to %s by %s", donation_request.pk, current, target, email)
    return donation_request
