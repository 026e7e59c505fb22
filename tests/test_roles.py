from types import SimpleNamespace

from django.test import SimpleTestCase

from bloodaid.exceptions import Forbidden
from bloodaid.roles import (
    Action, Role, authorize_request_access, authorize_role_change,
    is_allowed, sees_full_account,
)


class TestCapabilities(SimpleTestCase):

    def test_donor_capabilities(self):
        self.assertTrue(is_allowed(Role.DONOR, Action.CREATE_REQUEST))
        self.assertTrue(is_allowed(Role.DONOR, Action.TRANSITION_REQUEST))
        self.assertFalse(is_allowed(Role.DONOR, Action.VIEW_ANY_REQUEST))
        self.assertFalse(is_allowed(Role.DONOR, Action.LIST_ACCOUNTS))
        self.assertFalse(is_allowed(Role.DONOR, Action.VIEW_STATS))
        self.assertFalse(is_allowed(Role.DONOR, Action.MANAGE_FUNDS))

    def test_volunteer_is_not_an_admin(self):
        self.assertTrue(is_allowed(Role.VOLUNTEER, Action.LIST_ACCOUNTS))
        self.assertTrue(is_allowed(Role.VOLUNTEER, Action.VIEW_STATS))
        self.assertTrue(is_allowed(Role.VOLUNTEER, Action.VIEW_ANY_REQUEST))
        self.assertFalse(is_allowed(Role.VOLUNTEER, Action.VIEW_ACCOUNT_DETAILS))
        self.assertFalse(is_allowed(Role.VOLUNTEER, Action.MANAGE_ACCOUNTS))
        self.assertFalse(is_allowed(Role.VOLUNTEER, Action.MANAGE_FUNDS))
        self.assertFalse(is_allowed(Role.VOLUNTEER, Action.EDIT_ANY_REQUEST))

    def test_admin_has_every_capability(self):
        for action in Action:
            self.assertTrue(is_allowed(Role.ADMIN, action), action)

    def test_role_strings_are_accepted(self):
        self.assertTrue(is_allowed('admin', Action.MANAGE_ACCOUNTS))
        self.assertFalse(is_allowed(None, Action.CREATE_REQUEST))


class TestOwnershipRules(SimpleTestCase):

    def setUp(self):
        self.request = SimpleNamespace(requester_email='owner@x.com')

    def test_owner_reaches_own_request(self):
        authorize_request_access(Role.DONOR, 'owner@x.com', self.request, Action.EDIT_ANY_REQUEST)

    def test_other_donor_is_forbidden(self):
        with self.assertRaises(Forbidden):
            authorize_request_access(Role.DONOR, 'other@x.com', self.request, Action.VIEW_ANY_REQUEST)

    def test_volunteer_may_view_but_not_edit(self):
        authorize_request_access(Role.VOLUNTEER, 'v@x.com', self.request, Action.VIEW_ANY_REQUEST)
        with self.assertRaises(Forbidden):
            authorize_request_access(Role.VOLUNTEER, 'v@x.com', self.request, Action.EDIT_ANY_REQUEST)

    def test_admin_cannot_change_own_role(self):
        with self.assertRaises(Forbidden):
            authorize_role_change(Role.ADMIN, 'admin@x.com', 'admin@x.com')
        authorize_role_change(Role.ADMIN, 'admin@x.com', 'other@x.com')

    def test_only_admin_changes_roles(self):
        with self.assertRaises(Forbidden):
            authorize_role_change(Role.VOLUNTEER, 'v@x.com', 'other@x.com')

    def test_full_account_projection(self):
        account = SimpleNamespace(email='a@x.com')
        self.assertTrue(sees_full_account(Role.DONOR, 'a@x.com', account))
        self.assertTrue(sees_full_account(Role.ADMIN, 'admin@x.com', account))
        self.assertFalse(sees_full_account(Role.VOLUNTEER, 'v@x.com', account))
