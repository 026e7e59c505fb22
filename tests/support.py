import datetime
from decimal import Decimal

from rest_framework.test import APITestCase

from bloodaid.authentication import Caller
from bloodaid.models import Account, DonationRequest
from bloodaid.payments import PaymentSession


def make_account(email, role='donor', status='active', **extra):
    extra.setdefault('name', email.split('@')[0].title())
    return Account.objects.create(email=email, role=role, status=status, **extra)


def make_request(requester, status='pending', **extra):
    fields = dict(
        requester_email=requester.email,
        requester_name=requester.name,
        recipient_name='Rahim',
        recipient_district='Dhaka',
        recipient_upazila='Savar',
        hospital_name='Dhaka Medical College',
        full_address='Bakshibazar, Dhaka',
        blood_group='O+',
        donation_date=datetime.date(2026, 11, 1),
        donation_time=datetime.time(10, 30),
        message='Urgent surgery',
        status=status,
    )
    fields.update(extra)
    return DonationRequest.objects.create(**fields)


REQUEST_PAYLOAD = {
    'recipient_name': 'Karim',
    'recipient_district': 'Chattogram',
    'recipient_upazila': 'Patiya',
    'hospital_name': 'Chattogram Medical College',
    'full_address': 'K.B. Fazlul Kader Rd',
    'blood_group': 'A-',
    'donation_date': '2026-11-05',
    'donation_time': '09:00',
    'message': 'Thalassemia patient',
}


class FakeGateway:
    """Stands in for the payment gateway; records calls on the class."""
    sessions = {}
    retrieved = []
    created = []

    def create_checkout_session(self, amount, label, customer_email=None):
        FakeGateway.created.append((amount, label, customer_email))
        return {'id': 'cs_test_1', 'url': 'https://checkout.example.com/cs_test_1'}

    def retrieve_session(self, session_id):
        FakeGateway.retrieved.append(session_id)
        payment_status, amount = FakeGateway.sessions[session_id]
        return PaymentSession(
            session_id=session_id,
            payment_status=payment_status,
            payer_name='Nadia',
            payer_email='nadia@example.com',
            amount_paid=Decimal(amount),
        )

    @classmethod
    def reset(cls, **sessions):
        cls.sessions = dict(sessions)
        cls.retrieved = []
        cls.created = []


class APITestBase(APITestCase):

    def login(self, email):
        self.client.force_authenticate(user=Caller(email))

    def logout(self):
        self.client.force_authenticate(user=None)
