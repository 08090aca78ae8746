"""
Integration tests: 真实 HTTP 请求打到 DRF View，验证完整流程。

  HTTP Request → urls.py → auth gate → intake → service → ORM → DB → Response

每个测试验证：status_code + response body 的统一格式。
"""
import json
from datetime import date

import pytest

from donations.models import DonationRecord
from tests.conftest import (
    BloodCenterFactory,
    DonationRecordFactory,
    DonorFactory,
    center_auth,
    donor_auth,
)


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def post_json(api_client, url, payload, **kwargs):
    response = api_client.post(url, data=json.dumps(payload), content_type='application/json', **kwargs)
    return response.status_code, json.loads(response.content)


def put_json(api_client, url, payload, **kwargs):
    response = api_client.put(url, data=json.dumps(payload), content_type='application/json', **kwargs)
    return response.status_code, json.loads(response.content)


def get_json(api_client, url, **kwargs):
    response = api_client.get(url, **kwargs)
    return response.status_code, json.loads(response.content)


# ===================================================================
# POST /api/donations/record
# ===================================================================

@pytest.mark.django_db
class TestRecordDonation:

    def test_success(self, api_client, sample_donation_payload):
        donor = DonorFactory()
        center = BloodCenterFactory()
        sample_donation_payload['donorId'] = str(donor.id)

        status, body = post_json(api_client, '/api/donations/record', sample_donation_payload, **center_auth(center))

        assert status == 201
        assert body['message'] == 'Donation recorded successfully'
        assert 'type' not in body

        record = DonationRecord.objects.get(donation_id=body['donationId'])
        assert record.status == 'Completed'
        assert record.hospital_id == center.id
        donor.refresh_from_db()
        assert donor.last_donation_date == date(2024, 5, 1)

    def test_unknown_donor_returns_404(self, api_client, sample_donation_payload):
        sample_donation_payload['donorId'] = '00000000-0000-0000-0000-000000000000'

        status, body = post_json(
            api_client, '/api/donations/record', sample_donation_payload, **center_auth(BloodCenterFactory())
        )

        assert status == 404
        assert body['type'] == 'not_found'
        assert body['code'] == 'DONOR_NOT_FOUND'
        assert DonationRecord.objects.count() == 0

    def test_invalid_blood_group_returns_400(self, api_client, sample_donation_payload):
        sample_donation_payload['donorId'] = str(DonorFactory().id)
        sample_donation_payload['bloodGroup'] = 'X+'

        status, body = post_json(
            api_client, '/api/donations/record', sample_donation_payload, **center_auth(BloodCenterFactory())
        )

        assert status == 400
        assert body['type'] == 'validation_error'
        assert [e['field'] for e in body['detail']['errors']] == ['bloodGroup']
        assert DonationRecord.objects.count() == 0

    def test_missing_token_returns_401(self, api_client, sample_donation_payload):
        sample_donation_payload['donorId'] = str(DonorFactory().id)
        status, _ = post_json(api_client, '/api/donations/record', sample_donation_payload)
        assert status == 401

    def test_donor_token_returns_403(self, api_client, sample_donation_payload):
        donor = DonorFactory()
        sample_donation_payload['donorId'] = str(donor.id)
        status, _ = post_json(api_client, '/api/donations/record', sample_donation_payload, **donor_auth(donor))
        assert status == 403

    def test_inactive_center_token_returns_401(self, api_client, sample_donation_payload):
        center = BloodCenterFactory(is_active=False)
        sample_donation_payload['donorId'] = str(DonorFactory().id)
        status, _ = post_json(api_client, '/api/donations/record', sample_donation_payload, **center_auth(center))
        assert status == 401


# ===================================================================
# GET /api/donations/center/<centerId>, /api/donations/donor/<donorId>
# ===================================================================

@pytest.mark.django_db
class TestListDonations:

    def test_center_list_sorted_and_populated(self, api_client):
        center = BloodCenterFactory()
        donor = DonorFactory(donor_name='Ada Obi', blood_group='A-')
        for day in (date(2024, 2, 1), date(2024, 4, 1), date(2024, 3, 1)):
            DonationRecordFactory(hospital=center, donor=donor, donation_date=day)

        status, body = get_json(api_client, f'/api/donations/center/{center.center_id}', **center_auth(center))

        assert status == 200
        assert [d['donationDate'] for d in body] == ['2024-04-01', '2024-03-01', '2024-02-01']
        assert body[0]['donorId']['donorName'] == 'Ada Obi'
        assert body[0]['donorId']['bloodGroup'] == 'A-'

    def test_center_list_empty(self, api_client):
        center = BloodCenterFactory()
        status, body = get_json(api_client, f'/api/donations/center/{center.center_id}', **center_auth(center))
        assert status == 200
        assert body == []

    def test_donor_reads_own_history(self, api_client):
        donation = DonationRecordFactory()
        donor = donation.donor

        status, body = get_json(api_client, f'/api/donations/donor/{donor.id}', **donor_auth(donor))

        assert status == 200
        assert body[0]['hospitalId']['centerName'] == donation.hospital.center_name

    def test_donor_cannot_read_other_donor(self, api_client):
        donation = DonationRecordFactory()
        status, _ = get_json(api_client, f'/api/donations/donor/{donation.donor.id}', **donor_auth(DonorFactory()))
        assert status == 403

    def test_associated_center_can_read_donor(self, api_client):
        donation = DonationRecordFactory()
        status, body = get_json(
            api_client, f'/api/donations/donor/{donation.donor.id}', **center_auth(donation.hospital)
        )
        assert status == 200
        assert len(body) == 1

    def test_unrelated_center_cannot_read_donor(self, api_client):
        donation = DonationRecordFactory()
        status, _ = get_json(
            api_client, f'/api/donations/donor/{donation.donor.id}', **center_auth(BloodCenterFactory())
        )
        assert status == 403


# ===================================================================
# PUT /api/donations/update/<donationId>
# ===================================================================

@pytest.mark.django_db
class TestUpdateDonationStatus:

    def test_success_preserves_notes(self, api_client):
        donation = DonationRecordFactory(status='Pending', medical_notes='original')

        status, body = put_json(
            api_client, f'/api/donations/update/{donation.donation_id}',
            {'status': 'Rejected', 'medicalNotes': ''},
            **center_auth(donation.hospital),
        )

        assert status == 200
        assert body['message'] == 'Donation status updated successfully'
        assert body['donation']['status'] == 'Rejected'
        assert body['donation']['medicalNotes'] == 'original'

    def test_other_center_returns_404(self, api_client):
        donation = DonationRecordFactory(status='Pending')

        status, body = put_json(
            api_client, f'/api/donations/update/{donation.donation_id}',
            {'status': 'Cancelled'},
            **center_auth(BloodCenterFactory()),
        )

        assert status == 404
        assert body['code'] == 'DONATION_NOT_FOUND'
        donation.refresh_from_db()
        assert donation.status == 'Pending'

    def test_invalid_status_returns_400(self, api_client):
        donation = DonationRecordFactory()
        status, body = put_json(
            api_client, f'/api/donations/update/{donation.donation_id}',
            {'status': 'Done'},
            **center_auth(donation.hospital),
        )
        assert status == 400
        assert body['type'] == 'validation_error'

    def test_strict_transition_returns_409(self, api_client, settings):
        settings.DONATION_STRICT_TRANSITIONS = True
        donation = DonationRecordFactory(status='Cancelled')

        status, body = put_json(
            api_client, f'/api/donations/update/{donation.donation_id}',
            {'status': 'Completed'},
            **center_auth(donation.hospital),
        )

        assert status == 409
        assert body['type'] == 'block'
        assert body['code'] == 'INVALID_STATUS_TRANSITION'


# ===================================================================
# Unified response format contract
# ===================================================================

@pytest.mark.django_db
class TestUnifiedResponseFormat:
    """
    前端的核心约定：
    - 成功响应：没有 type 字段
    - 错误响应：一定有 type / code / message 字段
    """

    def test_404_has_required_fields(self, api_client):
        status, body = put_json(
            api_client, '/api/donations/update/DON1-33-AAA', {'status': 'Completed'},
            **center_auth(BloodCenterFactory()),
        )
        assert status == 404
        assert {'type', 'code', 'message'} <= set(body)

    def test_invalid_json_is_validation_error(self, api_client):
        response = api_client.post(
            '/api/donations/record', data='{oops', content_type='application/json',
            **center_auth(BloodCenterFactory()),
        )
        body = json.loads(response.content)
        assert response.status_code == 400
        assert body['code'] == 'INVALID_JSON'


@pytest.mark.django_db
class TestMalformedDonorId:

    def test_donation_history_returns_json_404(self, api_client):
        status, body = get_json(api_client, '/api/donations/donor/not-a-uuid', **donor_auth(DonorFactory()))

        assert status == 404
        assert body['type'] == 'not_found'
        assert body['code'] == 'DONOR_NOT_FOUND'

    def test_center_token_gets_same_404(self, api_client):
        status, body = get_json(api_client, '/api/donations/donor/12345', **center_auth(BloodCenterFactory()))
        assert status == 404
        assert body['code'] == 'DONOR_NOT_FOUND'

    def test_missing_token_still_401(self, api_client):
        response = api_client.get('/api/donations/donor/not-a-uuid')
        assert response.status_code == 401
