"""
Funding ledger.

Records are append-only. A payment session is recorded at most once:
confirmations are keyed on the gateway's session id, which is unique in
the table.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction

from .exceptions import InvalidInput
from .models import FundRecord

logger = logging.getLogger(__name__)


def _positive_amount(amount):
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInput('Amount must be a number.')
    if not amount.is_finite() or amount <= 0:
        raise InvalidInput('Amount must be positive.')
    return amount


def confirm_payment(session_id, gateway):
    """
    Record a completed payment session. Returns ``(record, created)``.

    A session that was already recorded is returned as-is, without asking
    the gateway again.
    """
    if not session_id:
        raise InvalidInput('A payment session id is required.')

    existing = FundRecord.objects.filter(external_session_id=session_id).first()
    if existing is not None:
        return existing, False

    session = gateway.retrieve_session(session_id)
    if not session.is_paid:
        raise InvalidInput(f"Payment session {session_id} is not paid ({session.payment_status}).")

    with transaction.atomic():
        record, created = FundRecord.objects.get_or_create(
            external_session_id=session_id,
            defaults={
                'name': session.payer_name or 'Anonymous',
                'email': session.payer_email,
                'amount': _positive_amount(session.amount_paid),
            },
        )
    if created:
        logger.info("Recorded payment session %s for %s", session_id, record.amount)
    return record, created


def record_contribution(name, amount, email=None):
    name = (name or '').strip()
    if not name:
        raise InvalidInput('Name is required.')
    record = FundRecord.objects.create(name=name, email=email or '', amount=_positive_amount(amount))
    logger.info("Recorded manual contribution of %s from %s", record.amount, name)
    return record


def total_funds():
    return FundRecord.objects.total()
