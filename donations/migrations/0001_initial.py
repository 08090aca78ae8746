import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import donations.identifiers

BLOOD_GROUP_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Donor',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('donor_name', models.CharField(max_length=100)),
                ('blood_group', models.CharField(choices=BLOOD_GROUP_CHOICES, max_length=3)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('last_donation_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'donors',
            },
        ),
        migrations.CreateModel(
            name='BloodCenter',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('center_id', models.CharField(default=donations.identifiers.generate_center_id, max_length=20, unique=True)),
                ('center_name', models.CharField(max_length=100)),
                ('center_type', models.CharField(choices=[('Hospital', 'Hospital'), ('BloodBank', 'Blood Bank')], max_length=20)),
                ('location', models.CharField(max_length=255)),
                ('contact_number', models.CharField(max_length=30)),
                ('blood_types_needed', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'blood_centers',
            },
        ),
        migrations.CreateModel(
            name='DonationRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('donation_id', models.CharField(default=donations.identifiers.generate_donation_id, max_length=20, unique=True)),
                ('blood_group', models.CharField(choices=BLOOD_GROUP_CHOICES, max_length=3)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Completed', 'Completed'), ('Rejected', 'Rejected'), ('Cancelled', 'Cancelled')], default='Pending', max_length=20)),
                ('donation_date', models.DateField()),
                ('medical_notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='donations.donor')),
                ('hospital', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='donations.bloodcenter')),
            ],
            options={
                'db_table': 'donation_records',
                'ordering': ['-donation_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='DonorCard',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('card_id', models.CharField(default=donations.identifiers.generate_card_id, max_length=20, unique=True)),
                ('card_type', models.CharField(choices=[('physical', 'Physical'), ('electronic', 'Electronic')], max_length=20)),
                ('issue_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('expiry_date', models.DateTimeField()),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='cards', to='donations.donor')),
            ],
            options={
                'db_table': 'donor_cards',
            },
        ),
    ]
