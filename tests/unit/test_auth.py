"""
Unit tests for token signing and the auth gates.
"""
import pytest
from django.test import RequestFactory
from rest_framework.exceptions import AuthenticationFailed

from donations.auth import (
    KIND_CENTER,
    KIND_DONOR,
    CanAccessDonor,
    IsBloodCenter,
    Principal,
    PrincipalAuthentication,
    issue_token,
    read_token,
)
from tests.conftest import BloodCenterFactory, DonationRecordFactory, DonorFactory


class _View:
    def __init__(self, **kwargs):
        self.kwargs = kwargs


class _Request:
    def __init__(self, user):
        self.user = user


class TestTokens:

    def test_round_trip(self):
        token = issue_token(KIND_CENTER, 'CTR1-33-AAA')
        assert read_token(token) == {'kind': 'center', 'id': 'CTR1-33-AAA'}

    def test_tampered_token(self):
        token = issue_token(KIND_DONOR, 'abc')
        with pytest.raises(AuthenticationFailed):
            read_token(token + 'x')

    def test_expired_token(self, settings):
        token = issue_token(KIND_DONOR, 'abc')
        settings.AUTH_TOKEN_MAX_AGE = -1
        with pytest.raises(AuthenticationFailed) as exc_info:
            read_token(token)
        assert 'expired' in str(exc_info.value.detail).lower()

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            issue_token('admin', '1')


@pytest.mark.django_db
class TestPrincipalAuthentication:

    def _authenticate(self, header=None):
        extra = {'HTTP_AUTHORIZATION': header} if header else {}
        return PrincipalAuthentication().authenticate(RequestFactory().get('/', **extra))

    def test_no_header(self):
        assert self._authenticate() is None

    def test_other_scheme_ignored(self):
        assert self._authenticate('Basic abc') is None

    def test_center(self):
        center = BloodCenterFactory()
        principal, _ = self._authenticate(f'Bearer {issue_token(KIND_CENTER, center.center_id)}')
        assert principal.is_center
        assert principal.center.id == center.id

    def test_inactive_center_rejected(self):
        center = BloodCenterFactory(is_active=False)
        with pytest.raises(AuthenticationFailed):
            self._authenticate(f'Bearer {issue_token(KIND_CENTER, center.center_id)}')

    def test_donor(self):
        donor = DonorFactory()
        principal, _ = self._authenticate(f'Bearer {issue_token(KIND_DONOR, donor.id)}')
        assert principal.kind == KIND_DONOR
        assert principal.id == str(donor.id)

    def test_malformed_header(self):
        with pytest.raises(AuthenticationFailed):
            self._authenticate('Bearer a b')


@pytest.mark.django_db
class TestPermissions:

    def test_is_blood_center(self):
        center = BloodCenterFactory()
        assert IsBloodCenter().has_permission(_Request(Principal(KIND_CENTER, center.center_id, center)), None)
        assert not IsBloodCenter().has_permission(_Request(Principal(KIND_DONOR, 'x')), None)
        assert not IsBloodCenter().has_permission(_Request(None), None)

    def test_donor_can_access_self_only(self):
        donor = DonorFactory()
        other = DonorFactory()
        request = _Request(Principal(KIND_DONOR, str(donor.id)))

        assert CanAccessDonor().has_permission(request, _View(donor_id=donor.id))
        assert not CanAccessDonor().has_permission(request, _View(donor_id=other.id))

    def test_center_needs_a_donation_from_donor(self):
        donation = DonationRecordFactory()
        stranger = BloodCenterFactory()

        associated = _Request(Principal(KIND_CENTER, donation.hospital.center_id, donation.hospital))
        unrelated = _Request(Principal(KIND_CENTER, stranger.center_id, stranger))
        view = _View(donor_id=donation.donor.id)

        assert CanAccessDonor().has_permission(associated, view)
        assert not CanAccessDonor().has_permission(unrelated, view)
