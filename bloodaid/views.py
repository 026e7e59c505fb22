import logging

from django.db import transaction
from django.db.models import Count, Q
from django.http import HttpResponse

from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from . import ledger, lifecycle, roles
from .exceptions import NotFound
from .models import Account, DonationRequest, FundRecord, normalize_email
from .payments import get_gateway
from .permissions import CanListAccounts, CanManageFunds, CanViewStats, HasAccount, IsActiveAccount, IsAdmin
from .roles import Action, Role
from .serializers import (
    AccountSerializer, AccountStatusSerializer, AccountSummarySerializer,
    CheckoutSessionSerializer, ConfirmSessionSerializer, DonationRequestSerializer,
    FundRecordSerializer, ProfileSerializer, PublicDonationRequestSerializer,
    PublicDonorSerializer, RoleSerializer, StatusTransitionSerializer,
)

logger = logging.getLogger(__name__)


def health(request):
    return HttpResponse('BloodAid Server Running')


# -------------------------------
# Accounts
# -------------------------------
class AccountViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Sign-in upsert, own profile, and account moderation"""
    queryset = Account.objects.all()
    serializer_class = AccountSerializer
    lookup_field = 'email'
    lookup_value_regex = '[^/]+'

    def get_permissions(self):
        if self.action == 'list':
            return [permissions.IsAuthenticated(), CanListAccounts()]
        if self.action == 'set_status':
            return [permissions.IsAuthenticated(), IsAdmin()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        qs = Account.objects.all()
        if self.action == 'list':
            account_status = self.request.query_params.get('status')
            role = self.request.query_params.get('role')
            if account_status:
                qs = qs.filter(status=account_status)
            if role:
                qs = qs.filter(role=role)
        return qs

    def get_serializer_class(self):
        if self.action == 'list' and not roles.is_allowed(self.request.user.role, Action.VIEW_ACCOUNT_DETAILS):
            return AccountSummarySerializer
        return AccountSerializer

    def get_object(self):
        self.kwargs[self.lookup_field] = normalize_email(self.kwargs[self.lookup_field])
        return super().get_object()

    def _own_account(self):
        account = self.request.user.account
        if account is None:
            raise NotFound(f"No account for {self.request.user.email}.")
        return account

    def create(self, request):
        """Upsert on sign-in; the email always comes from the verified credential"""
        serializer = ProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account, created = Account.objects.upsert_login(request.user.email, **serializer.validated_data)
        return Response(
            AccountSerializer(account).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def retrieve(self, request, email=None):
        account = self.get_object()
        role = request.user.role
        roles.authorize_account_view(role, request.user.email, account)
        if roles.sees_full_account(role, request.user.email, account):
            return Response(AccountSerializer(account).data)
        return Response(AccountSummarySerializer(account).data)

    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        account = self._own_account()
        if request.method == 'PATCH':
            serializer = ProfileSerializer(account, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        return Response(AccountSerializer(account).data)

    @action(detail=True, methods=['get', 'patch'])
    def role(self, request, email=None):
        target_email = normalize_email(email)
        caller_role = request.user.role

        if request.method == 'GET':
            if target_email != request.user.email:
                roles.authorize(caller_role, Action.VIEW_ACCOUNT_DETAILS)
            account = self.get_object()
            return Response({'email': account.email, 'role': account.role})

        # unknown emails answer 403 like known ones for non-admins
        roles.authorize_role_change(caller_role, request.user.email, target_email)
        account = self.get_object()
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account.role = serializer.validated_data['role']
        account.save(update_fields=['role'])
        logger.info("%s changed role of %s to %s", request.user.email, account.email, account.role)
        return Response(AccountSerializer(account).data)

    @action(detail=True, methods=['patch'], url_path='status')
    def set_status(self, request, email=None):
        account = self.get_object()
        serializer = AccountStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account.status = serializer.validated_data['status']
        account.save(update_fields=['status'])
        logger.info("%s changed status of %s to %s", request.user.email, account.email, account.status)
        return Response(AccountSerializer(account).data)


# -------------------------------
# Public donor search
# -------------------------------
class DonorViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Active donors, public fields only"""
    serializer_class = PublicDonorSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        qs = Account.objects.public_donors()

        blood_group = self.request.query_params.get('blood_group')
        district = self.request.query_params.get('district')
        upazila = self.request.query_params.get('upazila')
        search = self.request.query_params.get('search')

        if blood_group:
            qs = qs.filter(blood_group=blood_group)
        if district:
            qs = qs.filter(district__iexact=district)
        if upazila:
            qs = qs.filter(upazila__iexact=upazila)
        if search:
            qs = qs.filter(
                Q(name__icontains=search) |
                Q(district__icontains=search) |
                Q(upazila__icontains=search)
            )
        return qs


# -------------------------------
# Donation Request ViewSet
# -------------------------------
class DonationRequestViewSet(viewsets.ModelViewSet):
    """Donation requests and their status workflow"""
    serializer_class = DonationRequestSerializer

    def get_permissions(self):
        if self.action == 'pending':
            return [permissions.AllowAny()]
        if self.action == 'create':
            return [permissions.IsAuthenticated(), IsActiveAccount()]
        return [permissions.IsAuthenticated(), HasAccount()]

    def get_queryset(self):
        """Donors list only their own requests, volunteers and admins see all"""
        qs = DonationRequest.objects.all()

        if self.action == 'pending':
            qs = qs.filter(status=lifecycle.PENDING)
            blood_group = self.request.query_params.get('blood_group')
            district = self.request.query_params.get('district')
            if blood_group:
                qs = qs.filter(blood_group=blood_group)
            if district:
                qs = qs.filter(recipient_district__iexact=district)
            return qs

        if self.action == 'list':
            user = self.request.user
            if not roles.is_allowed(user.role, Action.VIEW_ANY_REQUEST):
                qs = qs.filter(requester_email=user.email)
            request_status = self.request.query_params.get('status')
            if request_status:
                qs = qs.filter(status=request_status)
        return qs

    def perform_create(self, serializer):
        account = self.request.user.account
        donation_request = serializer.save(
            requester_email=account.email,
            requester_name=account.name or account.email,
        )
        logger.info("%s created donation request %s", account.email, donation_request.pk)

    def retrieve(self, request, pk=None):
        donation_request = self.get_object()
        roles.authorize_request_access(request.user.role, request.user.email, donation_request, Action.VIEW_ANY_REQUEST)
        return Response(self.get_serializer(donation_request).data)

    def update(self, request, pk=None, partial=False):
        """Owner or admin edits the request; identity and status fields are dropped"""
        donation_request = self.get_object()
        roles.authorize_request_access(request.user.role, request.user.email, donation_request, Action.EDIT_ANY_REQUEST)
        serializer = self.get_serializer(
            donation_request, data=lifecycle.permitted_changes(request.data), partial=partial,
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, pk=None):
        donation_request = self.get_object()
        roles.authorize_request_access(request.user.role, request.user.email, donation_request, Action.DELETE_ANY_REQUEST)
        donation_request.delete()
        logger.info("%s deleted donation request %s", request.user.email, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch'], url_path='status')
    def transition(self, request, pk=None):
        """Move the request through pending -> inprogress -> done/canceled"""
        payload = StatusTransitionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        role = request.user.role

        with transaction.atomic():
            donation_request = get_object_or_404(DonationRequest.objects.select_for_update(), pk=pk)
            lifecycle.apply_transition(
                donation_request,
                role,
                request.user.email,
                payload.validated_data['status'],
                donor_name=payload.validated_data.get('donor_name'),
                donor_email=payload.validated_data.get('donor_email'),
            )
        return Response(self.get_serializer(donation_request).data)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        """Public listing of requests still waiting for a donor"""
        page = self.paginate_queryset(self.get_queryset())
        serializer = PublicDonationRequestSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)


# -------------------------------
# Dashboard statistics
# -------------------------------
class StatsAPI(APIView):
    """Aggregate counts for volunteers and admins"""
    permission_classes = [permissions.IsAuthenticated, CanViewStats]

    def get(self, request):
        by_status = {value: 0 for value, _ in lifecycle.STATUS_CHOICES}
        for row in DonationRequest.objects.values('status').annotate(total=Count('id')):
            by_status[row['status']] = row['total']

        return Response({
            'total_donors': Account.objects.filter(role=Role.DONOR.value).count(),
            'total_requests': sum(by_status.values()),
            'requests_by_status': by_status,
            'total_funds': str(ledger.total_funds()),
        })


# -------------------------------
# Funding
# -------------------------------
class FundViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Contributions to the platform"""
    queryset = FundRecord.objects.all()
    serializer_class = FundRecordSerializer

    def get_permissions(self):
        if self.action in ('list', 'create'):
            return [permissions.IsAuthenticated(), CanManageFunds()]
        return [permissions.IsAuthenticated()]

    def create(self, request):
        """Record a contribution received outside the payment gateway"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = ledger.record_contribution(
            serializer.validated_data['name'],
            serializer.validated_data['amount'],
            email=serializer.validated_data.get('email'),
        )
        return Response(self.get_serializer(record).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def total(self, request):
        return Response({'total': str(ledger.total_funds())})

    @action(detail=False, methods=['post'], url_path='checkout-session')
    def checkout_session(self, request):
        serializer = CheckoutSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        account = request.user.account
        label = (
            serializer.validated_data.get('name')
            or (account.name if account else '')
            or request.user.email
        )
        session = get_gateway().create_checkout_session(
            serializer.validated_data['amount'], label, customer_email=request.user.email,
        )
        return Response(session)

    @action(detail=False, methods=['post'])
    def confirm(self, request):
        """Record a completed checkout session; repeating it changes nothing"""
        serializer = ConfirmSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record, created = ledger.confirm_payment(serializer.validated_data['session_id'], get_gateway())
        return Response(
            self.get_serializer(record).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
