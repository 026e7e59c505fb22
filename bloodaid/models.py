import logging
from decimal import Decimal

from django.db import models, transaction
from django.db.models import Sum
from django.utils import timezone

from .exceptions import NotFound
from .lifecycle import PENDING, STATUS_CHOICES
from .roles import AccountStatus, Role

logger = logging.getLogger(__name__)

BLOOD_GROUP_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'),
    ('B+', 'B+'), ('B-', 'B-'),
    ('O+', 'O+'), ('O-', 'O-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'),
]

ROLE_CHOICES = [
    (Role.DONOR.value, 'Donor'),
    (Role.VOLUNTEER.value, 'Volunteer'),
    (Role.ADMIN.value, 'Admin'),
]

ACCOUNT_STATUS_CHOICES = [
    (AccountStatus.ACTIVE.value, 'Active'),
    (AccountStatus.BLOCKED.value, 'Blocked'),
]

PROFILE_FIELDS = ('name', 'photo', 'blood_group', 'district', 'upazila', 'phone')


def normalize_email(email):
    return (email or '').strip().lower()


class AccountManager(models.Manager):

    def upsert_login(self, email, **profile):
        """
        Create the account on first sign-in, otherwise refresh its profile.

        Only profile fields and ``last_login`` are ever written here; role
        and status keep whatever an administrator last set. Returns
        ``(account, created)``.
        """
        email = normalize_email(email)
        profile = {key: value for key, value in profile.items() if key in PROFILE_FIELDS}
        now = timezone.now()

        with transaction.atomic():
            account, created = self.select_for_update().get_or_create(
                email=email,
                defaults=dict(
                    profile,
                    role=Role.DONOR.value,
                    status=AccountStatus.ACTIVE.value,
                    last_login=now,
                ),
            )
            if not created:
                changed = [key for key, value in profile.items() if value not in (None, '')]
                for key in changed:
                    setattr(account, key, profile[key])
                account.last_login = now
                account.save(update_fields=changed + ['last_login'])

        if created:
            logger.info("Created account %s", email)
        return account, created

    def role_for(self, email):
        role = self.filter(email=normalize_email(email)).values_list('role', flat=True).first()
        if role is None:
            raise NotFound(f"No account for {email}.")
        return Role(role)

    def public_donors(self):
        return self.filter(role=Role.DONOR.value, status=AccountStatus.ACTIVE.value)


class Account(models.Model):
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    photo = models.URLField(max_length=500, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=Role.DONOR.value)
    status = models.CharField(max_length=10, choices=ACCOUNT_STATUS_CHOICES, default=AccountStatus.ACTIVE.value)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES, blank=True)
    district = models.CharField(max_length=100, blank=True)
    upazila = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(blank=True, null=True)

    objects = AccountManager()

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def is_active(self):
        return self.status == AccountStatus.ACTIVE.value


class DonationRequest(models.Model):
    requester_email = models.EmailField(db_index=True)
    requester_name = models.CharField(max_length=150)
    recipient_name = models.CharField(max_length=150)
    recipient_district = models.CharField(max_length=100)
    recipient_upazila = models.CharField(max_length=100)
    hospital_name = models.CharField(max_length=255)
    full_address = models.CharField(max_length=255, blank=True)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    donation_date = models.DateField()
    donation_time = models.TimeField()
    message = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    # filled in when an admin assigns a donor
    donor_name = models.CharField(max_length=150, blank=True)
    donor_email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.requester_email} - {self.blood_group} ({self.status})"


class FundRecordQuerySet(models.QuerySet):

    def total(self):
        total = self.aggregate(total=Sum('amount'))['total'] or 0
        return Decimal(total).quantize(Decimal('0.01'))


class FundRecord(models.Model):
    name = models.CharField(max_length=150)
    email = models.EmailField(blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateTimeField(default=timezone.now)
    external_session_id = models.CharField(max_length=255, unique=True, blank=True, null=True)

    objects = FundRecordQuerySet.as_manager()

    class Meta:
        ordering = ['-date']

    def __str__(self):
        return f"{self.name} - {self.amount} on {self.date:%Y-%m-%d}"
