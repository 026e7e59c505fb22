import base64
import json
import logging

import firebase_admin
from django.conf import settings
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from rest_framework import authentication
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from .exceptions import Unauthorized, UpstreamFailure
from .models import Account, normalize_email

logger = logging.getLogger(__name__)


class Caller:
    """
    The verified identity behind a request.

    Set as ``request.user``. The stored account is looked up on every
    access so role and status changes apply to the very next request.
    """
    is_authenticated = True
    is_anonymous = False

    def __init__(self, email, claims=None):
        self.email = normalize_email(email)
        self.claims = claims or {}

    def __str__(self):
        return self.email

    @property
    def account(self):
        return Account.objects.filter(email=self.email).first()

    @property
    def role(self):
        return Account.objects.role_for(self.email)


def _email_from_claims(claims):
    email = claims.get(settings.IDENTITY_EMAIL_CLAIM)
    if not email:
        raise InvalidToken('Token carries no email claim.')
    return email


class BearerTokenAuthentication(JWTAuthentication):
    """
    Verify ``Authorization: Bearer <jwt>`` with simplejwt.

    Signature, expiry, audience and issuer checks follow ``SIMPLE_JWT``, which
    can point at an external identity provider's JWK set. The caller is
    whoever the ``email`` claim names; no account is required yet.
    """

    def get_user(self, validated_token):
        return Caller(_email_from_claims(validated_token), claims=dict(validated_token.payload))

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except InvalidToken:
            logger.warning("Rejected bearer token from %s", request.META.get('REMOTE_ADDR'))
            raise


def get_firebase_app():
    try:
        return firebase_admin.get_app()
    except ValueError:
        service_key = json.loads(base64.b64decode(settings.FIREBASE_SERVICE_KEY).decode('utf-8'))
        return firebase_admin.initialize_app(credentials.Certificate(service_key))


class FirebaseAuthentication(authentication.BaseAuthentication):
    """Verify ``Authorization: Bearer <id token>`` with Firebase Admin."""
    keyword = 'Bearer'

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise Unauthorized('Invalid authorization header.')

        token = header[1].decode('utf-8', errors='replace')
        try:
            claims = firebase_auth.verify_id_token(token, app=get_firebase_app())
        except firebase_auth.CertificateFetchError:
            logger.exception("Could not fetch identity provider certificates")
            raise UpstreamFailure('Identity provider is unavailable.')
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.UserDisabledError):
            logger.warning("Rejected identity token from %s", request.META.get('REMOTE_ADDR'))
            raise Unauthorized('Invalid token.')

        email = claims.get(settings.IDENTITY_EMAIL_CLAIM)
        if not email:
            raise Unauthorized('Token carries no email claim.')
        return Caller(email, claims=claims), token

    def authenticate_header(self, request):
        return self.keyword
