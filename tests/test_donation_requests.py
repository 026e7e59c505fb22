from rest_framework import status

from bloodaid.models import DonationRequest

from .support import REQUEST_PAYLOAD, APITestBase, make_account, make_request


class TestCreateRequest(APITestBase):

    def test_active_donor_creates_pending_request(self):
        make_account('a@x.com', name='Alice')
        self.login('a@x.com')
        payload = dict(REQUEST_PAYLOAD, status='done', requester_email='evil@x.com')
        response = self.client.post('/api/donation-requests/', payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['requester_email'], 'a@x.com')
        self.assertEqual(response.data['requester_name'], 'Alice')

    def test_blocked_account_creates_nothing(self):
        make_account('blocked@x.com', status='blocked')
        self.login('blocked@x.com')
        response = self.client.post('/api/donation-requests/', REQUEST_PAYLOAD, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'BlockedAccount')
        self.assertFalse(DonationRequest.objects.exists())

    def test_missing_fields_are_invalid_input(self):
        make_account('a@x.com')
        self.login('a@x.com')
        response = self.client.post('/api/donation-requests/', {'blood_group': 'Z+'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'InvalidInput')
        self.assertIn('blood_group', response.data['detail'])


class TestRequestVisibility(APITestBase):

    def setUp(self):
        self.alice = make_account('a@x.com')
        self.bob = make_account('b@x.com')
        make_account('v@x.com', role='volunteer')
        self.alice_request = make_request(self.alice)
        self.bob_request = make_request(self.bob, status='inprogress')

    def test_donor_lists_own_requests(self):
        self.login('a@x.com')
        response = self.client.get('/api/donation-requests/')
        self.assertEqual([row['id'] for row in response.data['results']], [self.alice_request.pk])

    def test_volunteer_lists_all_with_status_filter(self):
        self.login('v@x.com')
        response = self.client.get('/api/donation-requests/')
        self.assertEqual(response.data['count'], 2)
        response = self.client.get('/api/donation-requests/', {'status': 'inprogress'})
        self.assertEqual([row['id'] for row in response.data['results']], [self.bob_request.pk])

    def test_donor_cannot_read_others(self):
        self.login('a@x.com')
        response = self.client.get(f'/api/donation-requests/{self.bob_request.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_request(self):
        self.login('a@x.com')
        response = self.client.get('/api/donation-requests/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'NotFound')

    def test_public_pending_listing(self):
        self.logout()
        response = self.client.get('/api/donation-requests/pending/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['results']], [self.alice_request.pk])
        self.assertNotIn('requester_email', response.data['results'][0])


class TestRequestEdits(APITestBase):

    def setUp(self):
        self.alice = make_account('a@x.com')
        make_account('b@x.com')
        make_account('admin@x.com', role='admin')
        make_account('v@x.com', role='volunteer')
        self.donation_request = make_request(self.alice)
        self.url = f'/api/donation-requests/{self.donation_request.pk}/'

    def test_owner_update_drops_immutable_fields(self):
        self.login('a@x.com')
        response = self.client.patch(self.url, {
            'hospital_name': 'Square Hospital',
            'status': 'done',
            'requester_email': 'evil@x.com',
            'donor_email': 'd@x.com',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stored = DonationRequest.objects.get(pk=self.donation_request.pk)
        self.assertEqual(stored.hospital_name, 'Square Hospital')
        self.assertEqual(stored.status, 'pending')
        self.assertEqual(stored.requester_email, 'a@x.com')
        self.assertEqual(stored.donor_email, '')

    def test_admin_may_edit(self):
        self.login('admin@x.com')
        response = self.client.patch(self.url, {'message': 'Moved to ICU'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Moved to ICU')

    def test_volunteer_and_other_donor_may_not_edit(self):
        for email in ('v@x.com', 'b@x.com'):
            self.login(email)
            response = self.client.patch(self.url, {'message': 'Hijack'}, format='json')
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_by_owner(self):
        self.login('b@x.com')
        self.assertEqual(self.client.delete(self.url).status_code, status.HTTP_403_FORBIDDEN)
        self.login('a@x.com')
        self.assertEqual(self.client.delete(self.url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(DonationRequest.objects.exists())


class TestStatusTransitions(APITestBase):

    def setUp(self):
        self.alice = make_account('a@x.com')
        make_account('b@x.com')
        make_account('admin@x.com', role='admin')
        make_account('v@x.com', role='volunteer')

    def move(self, donation_request, new_status, **extra):
        return self.client.patch(
            f'/api/donation-requests/{donation_request.pk}/status/',
            dict(extra, status=new_status),
            format='json',
        )

    def test_full_lifecycle_scenario(self):
        self.login('a@x.com')
        response = self.client.post('/api/donation-requests/', REQUEST_PAYLOAD, format='json')
        donation_request = DonationRequest.objects.get(pk=response.data['id'])
        self.assertEqual(donation_request.status, 'pending')

        self.login('admin@x.com')
        response = self.move(donation_request, 'inprogress', donor_name='Sakib', donor_email='sakib@x.com')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['donor_email'], 'sakib@x.com')

        self.login('v@x.com')
        response = self.move(donation_request, 'done')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'done')

        for email in ('admin@x.com', 'v@x.com', 'a@x.com'):
            self.login(email)
            for new_status in ('pending', 'inprogress', 'canceled', 'done'):
                response = self.move(donation_request, new_status)
                self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
                self.assertEqual(response.data['error'], 'InvalidTransition')
        self.assertEqual(DonationRequest.objects.get(pk=donation_request.pk).status, 'done')

    def test_non_admin_cannot_start_progress(self):
        donation_request = make_request(self.alice)
        for email in ('a@x.com', 'v@x.com'):
            self.login(email)
            response = self.move(donation_request, 'inprogress')
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(DonationRequest.objects.get(pk=donation_request.pk).status, 'pending')

    def test_owner_cancels_inprogress_request(self):
        donation_request = make_request(self.alice, status='inprogress')
        self.login('a@x.com')
        response = self.move(donation_request, 'canceled')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'canceled')

    def test_other_donor_is_forbidden(self):
        donation_request = make_request(self.alice, status='inprogress')
        self.login('b@x.com')
        response = self.move(donation_request, 'done')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Forbidden')

    def test_non_numeric_id_is_not_found(self):
        self.login('admin@x.com')
        response = self.client.patch('/api/donation-requests/abc/status/', {'status': 'inprogress'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'NotFound')

    def test_unknown_status_is_invalid_input(self):
        donation_request = make_request(self.alice)
        self.login('admin@x.com')
        response = self.move(donation_request, 'approved')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'InvalidInput')


class TestStats(APITestBase):

    def test_counts(self):
        alice = make_account('a@x.com')
        make_account('v@x.com', role='volunteer')
        make_request(alice)
        make_request(alice, status='done')

        self.login('v@x.com')
        response = self.client.get('/api/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_donors'], 1)
        self.assertEqual(response.data['total_requests'], 2)
        self.assertEqual(response.data['requests_by_status']['done'], 1)
        self.assertEqual(response.data['total_funds'], '0.00')

        self.login('a@x.com')
        self.assertEqual(self.client.get('/api/stats/').status_code, status.HTTP_403_FORBIDDEN)
