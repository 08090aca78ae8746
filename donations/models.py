import uuid
from django.db import models
from django.utils import timezone

from .identifiers import IDENTIFIER_MAX_LENGTH, generate_card_id, generate_center_id, generate_donation_id

BLOOD_GROUPS = ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']
BLOOD_GROUP_CHOICES = [(group, group) for group in BLOOD_GROUPS]


class Donor(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor_name = models.CharField(max_length=100)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    email = models.EmailField(blank=True, default='')
    last_donation_date = models.DateField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'donors'


class BloodCenter(models.Model):
    CENTER_TYPE_CHOICES = [
        ('Hospital', 'Hospital'),
        ('BloodBank', 'Blood Bank'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    center_id = models.CharField(max_length=IDENTIFIER_MAX_LENGTH, unique=True, default=generate_center_id)
    center_name = models.CharField(max_length=100)
    center_type = models.CharField(max_length=20, choices=CENTER_TYPE_CHOICES)
    location = models.CharField(max_length=255)
    contact_number = models.CharField(max_length=30)
    blood_types_needed = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'blood_centers'


class DonationRecord(models.Model):
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Completed', 'Completed'),
        ('Rejected', 'Rejected'),
        ('Cancelled', 'Cancelled'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donation_id = models.CharField(max_length=IDENTIFIER_MAX_LENGTH, unique=True, default=generate_donation_id)
    donor = models.ForeignKey(Donor, on_delete=models.PROTECT, related_name='donations')
    hospital = models.ForeignKey(BloodCenter, on_delete=models.PROTECT, related_name='donations')
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    donation_date = models.DateField()
    medical_notes = models.CharField(max_length=500, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'donation_records'
        ordering = ['-donation_date', '-created_at']


class DonorCard(models.Model):
    CARD_TYPE_CHOICES = [
        ('physical', 'Physical'),
        ('electronic', 'Electronic'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    card_id = models.CharField(max_length=IDENTIFIER_MAX_LENGTH, unique=True, default=generate_card_id)
    donor = models.ForeignKey(Donor, on_delete=models.PROTECT, related_name='cards')
    card_type = models.CharField(max_length=20, choices=CARD_TYPE_CHOICES)
    issue_date = models.DateTimeField(default=timezone.now)
    expiry_date = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'donor_cards'
