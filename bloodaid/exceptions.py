from django.http import Http404
from rest_framework import exceptions, status


class Unauthorized(exceptions.NotAuthenticated):
    default_detail = 'Authentication credentials were not provided or are invalid.'
    default_code = 'unauthorized'


class Forbidden(exceptions.PermissionDenied):
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'


class NotFound(exceptions.NotFound):
    default_code = 'not_found'


class InvalidInput(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


class BlockedAccount(exceptions.PermissionDenied):
    default_detail = 'This account is blocked.'
    default_code = 'blocked_account'


class InvalidTransition(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This status change is not allowed.'
    default_code = 'invalid_transition'


class UpstreamFailure(exceptions.APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'An upstream service failed.'
    default_code = 'upstream_failure'


# Most specific first: BlockedAccount is also a PermissionDenied.
ERROR_KINDS = (
    (BlockedAccount, 'BlockedAccount'),
    (InvalidTransition, 'InvalidTransition'),
    (UpstreamFailure, 'UpstreamFailure'),
    (exceptions.NotAuthenticated, 'Unauthorized'),
    (exceptions.AuthenticationFailed, 'Unauthorized'),
    (exceptions.PermissionDenied, 'Forbidden'),
    (exceptions.NotFound, 'NotFound'),
    (Http404, 'NotFound'),
    (InvalidInput, 'InvalidInput'),
    (exceptions.ValidationError, 'InvalidInput'),
    (exceptions.ParseError, 'InvalidInput'),
)


def error_kind(exc):
    for exc_class, kind in ERROR_KINDS:
        if isinstance(exc, exc_class):
            return kind
    return getattr(exc, 'default_code', 'error')

