"""
Role policy: which role may do what.

A role is a capability set, not a rank. Admin does not inherit from
volunteer, and volunteer does not inherit from donor. Ownership rules
(a donor acting on their own request or account) are checked separately
in the ``authorize_*`` helpers.
"""
import enum

from .exceptions import Forbidden


class Role(str, enum.Enum):
    DONOR = 'donor'
    VOLUNTEER = 'volunteer'
    ADMIN = 'admin'


class AccountStatus(str, enum.Enum):
    ACTIVE = 'active'
    BLOCKED = 'blocked'


class Action(enum.Enum):
    CREATE_REQUEST = 'create_request'
    VIEW_ANY_REQUEST = 'view_any_request'
    EDIT_ANY_REQUEST = 'edit_any_request'
    DELETE_ANY_REQUEST = 'delete_any_request'
    TRANSITION_REQUEST = 'transition_request'
    LIST_ACCOUNTS = 'list_accounts'
    VIEW_ACCOUNT_DETAILS = 'view_account_details'
    MANAGE_ACCOUNTS = 'manage_accounts'
    VIEW_STATS = 'view_stats'
    MANAGE_FUNDS = 'manage_funds'


CAPABILITIES = {
    Role.DONOR: frozenset({
        Action.CREATE_REQUEST,
        Action.TRANSITION_REQUEST,
    }),
    Role.VOLUNTEER: frozenset({
        Action.CREATE_REQUEST,
        Action.VIEW_ANY_REQUEST,
        Action.TRANSITION_REQUEST,
        Action.LIST_ACCOUNTS,
        Action.VIEW_STATS,
    }),
    Role.ADMIN: frozenset(Action),
}


def is_allowed(role, action):
    """Pure capability lookup, independent of how roles are stored."""
    if role is None:
        return False
    return action in CAPABILITIES.get(Role(role), frozenset())


def authorize(role, action):
    if not is_allowed(role, action):
        raise Forbidden()


def authorize_request_access(role, email, donation_request, action):
    """Owners always reach their own request; everyone else needs ``action``."""
    if donation_request.requester_email == email:
        return
    authorize(role, action)


def authorize_account_view(role, email, account):
    if account.email == email:
        return
    authorize(role, Action.LIST_ACCOUNTS)


def authorize_role_change(role, email, target_email):
    authorize(role, Action.MANAGE_ACCOUNTS)
    if email == target_email:
        raise Forbidden('Administrators cannot change their own role.')


def sees_full_account(role, email, account):
    return account.email == email or is_allowed(role, Action.VIEW_ACCOUNT_DETAILS)
