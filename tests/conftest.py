"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
import pytest
from datetime import date, timedelta
from django.test import Client
from django.utils import timezone

import factory
from donations.auth import KIND_CENTER, KIND_DONOR, issue_token
from donations.models import BloodCenter, DonationRecord, Donor, DonorCard


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class DonorFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Donor

    donor_name = factory.Sequence(lambda n: f'Donor {n}')
    blood_group = 'O+'
    email = factory.Sequence(lambda n: f'donor{n}@example.com')


class BloodCenterFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = BloodCenter

    center_name = 'City General'
    center_type = 'Hospital'
    location = '12 Main Street'
    contact_number = '+1 555-010-0199'
    blood_types_needed = factory.LazyFunction(lambda: ['O-', 'A+'])


class DonationRecordFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = DonationRecord

    donor = factory.SubFactory(DonorFactory)
    hospital = factory.SubFactory(BloodCenterFactory)
    blood_group = 'O+'
    status = 'Completed'
    donation_date = date(2024, 5, 1)
    medical_notes = ''


class DonorCardFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = DonorCard

    donor = factory.SubFactory(DonorFactory)
    card_type = 'physical'
    issue_date = factory.LazyFunction(timezone.now)
    expiry_date = factory.LazyAttribute(lambda o: o.issue_date + timedelta(days=730))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def api_client():
    """Django test client for integration tests."""
    return Client()


def center_auth(center):
    """Client kwargs carrying a bearer token for ``center``."""
    return {'HTTP_AUTHORIZATION': f'Bearer {issue_token(KIND_CENTER, center.center_id)}'}


def donor_auth(donor):
    return {'HTTP_AUTHORIZATION': f'Bearer {issue_token(KIND_DONOR, donor.id)}'}


@pytest.fixture
def sample_donation_payload():
    """Minimal valid payload for POST /api/donations/record (donorId filled in by the test)."""
    return {
        'bloodGroup': 'O+',
        'donationDate': '2024-05-01T09:30:00.000Z',
        'medicalNotes': 'Hb 14.2 g/dL',
    }


@pytest.fixture
def sample_center_payload():
    """Minimal valid payload for POST /api/centers."""
    return {
        'centerName': 'Riverside Blood Bank',
        'centerType': 'BloodBank',
        'location': '4 River Road',
        'contactNumber': '0123 456 789',
        'bloodTypesNeeded': ['O-', 'O-', 'B+'],
    }
