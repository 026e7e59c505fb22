from rest_framework import permissions

from .exceptions import BlockedAccount, NotFound
from .roles import Action, is_allowed


class CapabilityPermission(permissions.BasePermission):
    """Grant access when the caller's stored role carries ``action``."""
    action = None
    message = 'Your role does not allow this action.'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return is_allowed(user.role, self.action)


def allows(action):
    """Build a permission class for one ``Action``; compose with ``&`` / ``|``."""
    name = 'Allows' + ''.join(part.title() for part in action.value.split('_'))
    return type(name, (CapabilityPermission,), {'action': action})


class HasAccount(permissions.BasePermission):
    """The caller signed in before and has a stored account."""

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.account is None:
            raise NotFound(f"No account for {user.email}.")
        return True


class IsActiveAccount(permissions.BasePermission):
    """Blocked accounts may not create anything."""

    def has_permission(self, request, view):
        account = request.user.account
        if account is None:
            raise NotFound(f"No account for {request.user.email}.")
        if not account.is_active:
            raise BlockedAccount()
        return True


IsAdmin = allows(Action.MANAGE_ACCOUNTS)
CanListAccounts = allows(Action.LIST_ACCOUNTS)
CanViewStats = allows(Action.VIEW_STATS)
CanManageFunds = allows(Action.MANAGE_FUNDS)
