from django.db import migrations, models
import django.utils.timezone


BLOOD_GROUP_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'),
    ('B+', 'B+'), ('B-', 'B-'),
    ('O+', 'O+'), ('O-', 'O-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Account',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('name', models.CharField(blank=True, max_length=150)),
                ('photo', models.URLField(blank=True, max_length=500)),
                ('role', models.CharField(choices=[('donor', 'Donor'), ('volunteer', 'Volunteer'), ('admin', 'Admin')], default='donor', max_length=10)),
                ('status', models.CharField(choices=[('active', 'Active'), ('blocked', 'Blocked')], default='active', max_length=10)),
                ('blood_group', models.CharField(blank=True, choices=BLOOD_GROUP_CHOICES, max_length=3)),
                ('district', models.CharField(blank=True, max_length=100)),
                ('upazila', models.CharField(blank=True, max_length=100)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('last_login', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='DonationRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('requester_email', models.EmailField(db_index=True, max_length=254)),
                ('requester_name', models.CharField(max_length=150)),
                ('recipient_name', models.CharField(max_length=150)),
                ('recipient_district', models.CharField(max_length=100)),
                ('recipient_upazila', models.CharField(max_length=100)),
                ('hospital_name', models.CharField(max_length=255)),
                ('full_address', models.CharField(blank=True, max_length=255)),
                ('blood_group', models.CharField(choices=BLOOD_GROUP_CHOICES, max_length=3)),
                ('donation_date', models.DateField()),
                ('donation_time', models.TimeField()),
                ('message', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('inprogress', 'In progress'), ('done', 'Done'), ('canceled', 'Canceled')], default='pending', max_length=10)),
                ('donor_name', models.CharField(blank=True, max_length=150)),
                ('donor_email', models.EmailField(blank=True, max_length=254)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='FundRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('external_session_id', models.CharField(blank=True, max_length=255, null=True, unique=True)),
            ],
            options={
                'ordering': ['-date'],
            },
        ),
    ]
