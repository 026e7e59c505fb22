"""
Payment gateway client.

The platform never handles card data. It asks the gateway for a hosted
checkout page, then later reads back the completed session to record the
contribution. ``StripeCheckoutGateway`` speaks Stripe's REST API directly;
any class with the same two methods can be plugged in through the
``PAYMENT_GATEWAY`` setting.
"""
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import InvalidInput, NotFound, UpstreamFailure

logger = logging.getLogger(__name__)

PAID = 'paid'


@dataclass(frozen=True)
class PaymentSession:
    session_id: str
    payment_status: str
    payer_name: str
    payer_email: str
    amount_paid: Decimal

    @property
    def is_paid(self):
        return self.payment_status == PAID


def to_minor_units(amount):
    return int((Decimal(amount) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def from_minor_units(value):
    return (Decimal(value or 0) / 100).quantize(Decimal('0.01'))


class StripeCheckoutGateway:
    api_base = 'https://api.stripe.com/v1'

    def __init__(self, secret_key=None, currency=None, success_url=None, cancel_url=None, timeout=None):
        self.secret_key = secret_key or settings.STRIPE_SECRET_KEY
        self.currency = currency or settings.PAYMENT_CURRENCY
        self.success_url = success_url or settings.PAYMENT_SUCCESS_URL
        self.cancel_url = cancel_url or settings.PAYMENT_CANCEL_URL
        self.timeout = timeout or settings.PAYMENT_GATEWAY_TIMEOUT

    def create_checkout_session(self, amount, label, customer_email=None):
        data = {
            'mode': 'payment',
            'success_url': self.success_url,
            'cancel_url': self.cancel_url,
            'line_items[0][quantity]': 1,
            'line_items[0][price_data][currency]': self.currency,
            'line_items[0][price_data][unit_amount]': to_minor_units(amount),
            'line_items[0][price_data][product_data][name]': label,
            'metadata[donor_name]': label,
        }
        if customer_email:
            data['customer_email'] = customer_email
            data['metadata[donor_email]'] = customer_email

        session = self._request('POST', '/checkout/sessions', data=data)
        return {'id': session['id'], 'url': session['url']}

    def retrieve_session(self, session_id):
        session = self._request('GET', f'/checkout/sessions/{session_id}')
        customer = session.get('customer_details') or {}
        metadata = session.get('metadata') or {}
        return PaymentSession(
            session_id=session['id'],
            payment_status=session.get('payment_status', ''),
            payer_name=customer.get('name') or metadata.get('donor_name') or '',
            payer_email=customer.get('email') or metadata.get('donor_email') or '',
            amount_paid=from_minor_units(session.get('amount_total')),
        )

    def _request(self, method, path, data=None):
        url = self.api_base + path
        try:
            response = requests.request(
                method, url, data=data, auth=(self.secret_key, ''), timeout=self.timeout,
            )
        except requests.RequestException:
            logger.exception("Payment gateway request %s %s failed", method, path)
            raise UpstreamFailure('Payment gateway is unavailable.')

        if response.status_code == 404:
            raise NotFound('Unknown payment session.')
        if response.status_code >= 500:
            logger.error("Payment gateway returned %s for %s %s", response.status_code, method, path)
            raise UpstreamFailure('Payment gateway error.')
        try:
            body = response.json()
        except ValueError:
            logger.error("Payment gateway sent a non-JSON body (%s) for %s %s", response.status_code, method, path)
            raise UpstreamFailure('Payment gateway sent an unreadable response.')

        if response.status_code >= 400:
            message = (body.get('error') or {}).get('message', 'Payment gateway rejected the request.')
            raise InvalidInput(message)
        return body


def get_gateway():
    return import_string(settings.PAYMENT_GATEWAY)()
