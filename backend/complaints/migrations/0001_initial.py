# Generated manually for the initial complaints schema

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


GENDER_CHOICES = [
    ('male', 'Male'),
    ('female', 'Female'),
    ('other', 'Other'),
    ('prefer_not_say', 'Prefer not to say'),
]

STATUS_CHOICES = [
    ('submitted', 'Submitted'),
    ('received', 'Received'),
    ('reviewing', 'Reviewing'),
    ('investigating', 'Investigating'),
    ('resolved', 'Resolved'),
    ('archived', 'Archived'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Complaint',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('protocol_number', models.CharField(max_length=32, unique=True, verbose_name='Protocol Number')),
                ('complaint_type', models.CharField(choices=[('missing-person', 'Missing Person'), ('common-crime', 'Common Crime'), ('corruption', 'Corruption'), ('domestic-violence', 'Domestic Violence'), ('cyber-crime', 'Cyber Crime')], db_index=True, max_length=30, verbose_name='Complaint Type')),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='submitted', max_length=20, verbose_name='Current Status')),
                ('is_anonymous', models.BooleanField(default=False, verbose_name='Anonymous')),
                ('reporter_name', models.CharField(blank=True, max_length=255, null=True, verbose_name='Reporter Name')),
                ('reporter_contact', models.CharField(blank=True, max_length=50, null=True, verbose_name='Reporter Contact')),
                ('reporter_email', models.EmailField(blank=True, max_length=254, null=True, verbose_name='Reporter Email')),
                ('reporter_bi', models.CharField(blank=True, db_index=True, max_length=14, null=True, verbose_name='Reporter BI Number')),
                ('incident_date', models.DateField(blank=True, null=True, verbose_name='Incident Date')),
                ('incident_time', models.TimeField(blank=True, null=True, verbose_name='Incident Time')),
                ('location', models.CharField(blank=True, default='', max_length=500, verbose_name='Location')),
                ('latitude', models.FloatField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(-90), django.core.validators.MaxValueValidator(90)])),
                ('longitude', models.FloatField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(-180), django.core.validators.MaxValueValidator(180)])),
                ('description', models.TextField(verbose_name='Description')),
                ('investigator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_complaints', to=settings.AUTH_USER_MODEL, verbose_name='Assigned Investigator')),
                ('reporter_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reported_complaints', to=settings.AUTH_USER_MODEL, verbose_name='Reporter Account')),
            ],
            options={
                'verbose_name': 'Complaint',
                'verbose_name_plural': 'Complaints',
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            ('is_anonymous', False),
                            models.Q(
                                ('reporter_name__isnull', True),
                                ('reporter_contact__isnull', True),
                                ('reporter_email__isnull', True),
                                ('reporter_bi__isnull', True),
                            ),
                            _connector='OR',
                        ),
                        name='complaint_anonymous_has_no_identity',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProtocolSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('day', models.DateField(unique=True, verbose_name='Day')),
                ('last_value', models.PositiveIntegerField(default=0, verbose_name='Last Issued Value')),
            ],
            options={
                'verbose_name': 'Protocol Sequence',
                'verbose_name_plural': 'Protocol Sequences',
            },
        ),
        migrations.CreateModel(
            name='ComplaintUpdate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('status', models.CharField(choices=STATUS_CHOICES, max_length=20, verbose_name='Status')),
                ('description', models.TextField(verbose_name='Description')),
                ('is_public', models.BooleanField(default=True, verbose_name='Public')),
                ('complaint', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='updates', to='complaints.complaint', verbose_name='Complaint')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='complaint_updates', to=settings.AUTH_USER_MODEL, verbose_name='Updated By')),
            ],
            options={
                'verbose_name': 'Complaint Update',
                'verbose_name_plural': 'Complaint Updates',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='MissingPersonDetails',
            fields=[
                ('complaint', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='missingpersondetails', serialize=False, to='complaints.complaint', verbose_name='Complaint')),
                ('full_name', models.CharField(max_length=255, verbose_name='Full Name')),
                ('age', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=GENDER_CHOICES, default='', max_length=20)),
                ('physical_description', models.TextField(blank=True, default='')),
                ('last_seen_location', models.CharField(blank=True, default='', max_length=500)),
                ('last_seen_date', models.DateField(blank=True, null=True)),
                ('last_seen_time', models.TimeField(blank=True, null=True)),
                ('clothing_description', models.TextField(blank=True, default='')),
                ('last_seen_with', models.TextField(blank=True, default='')),
                ('medical_conditions', models.TextField(blank=True, default='')),
                ('frequent_places', models.TextField(blank=True, default='')),
                ('relationship_to_reporter', models.CharField(blank=True, default='', max_length=100)),
            ],
            options={
                'verbose_name': 'Missing Person Details',
                'verbose_name_plural': 'Missing Person Details',
            },
        ),
        migrations.CreateModel(
            name='CommonCrimeDetails',
            fields=[
                ('complaint', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='commoncrimedetails', serialize=False, to='complaints.complaint', verbose_name='Complaint')),
                ('crime_type', models.CharField(blank=True, default='', max_length=100)),
                ('other_crime_type', models.CharField(blank=True, default='', max_length=255)),
                ('brief_description', models.TextField(blank=True, default='')),
                ('people_involved', models.TextField(blank=True, default='')),
            ],
            options={
                'verbose_name': 'Common Crime Details',
                'verbose_name_plural': 'Common Crime Details',
            },
        ),
        migrations.CreateModel(
            name='CorruptionDetails',
            fields=[
                ('complaint', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='corruptiondetails', serialize=False, to='complaints.complaint', verbose_name='Complaint')),
                ('corruption_type', models.CharField(blank=True, default='', max_length=100)),
                ('institution', models.CharField(blank=True, default='', max_length=255)),
                ('official_name', models.CharField(blank=True, default='', max_length=255)),
                ('estimated_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('currency', models.CharField(default='AOA', max_length=3)),
                ('how_known', models.TextField(blank=True, default='')),
            ],
            options={
                'verbose_name': 'Corruption Details',
                'verbose_name_plural': 'Corruption Details',
            },
        ),
        migrations.CreateModel(
            name='DomesticViolenceDetails',
            fields=[
                ('complaint', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='domesticviolencedetails', serialize=False, to='complaints.complaint', verbose_name='Complaint')),
                ('victim_name', models.CharField(blank=True, default='', max_length=255)),
                ('victim_age', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('victim_gender', models.CharField(blank=True, choices=GENDER_CHOICES, default='', max_length=20)),
                ('relationship_with_aggressor', models.CharField(blank=True, default='', max_length=100)),
                ('violence_type', models.CharField(blank=True, default='', max_length=100)),
                ('frequency', models.CharField(blank=True, default='', max_length=100)),
                ('children_involved', models.BooleanField(blank=True, null=True)),
                ('needs_medical_help', models.BooleanField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Domestic Violence Details',
                'verbose_name_plural': 'Domestic Violence Details',
            },
        ),
        migrations.CreateModel(
            name='CyberCrimeDetails',
            fields=[
                ('complaint', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='cybercrimedetails', serialize=False, to='complaints.complaint', verbose_name='Complaint')),
                ('cyber_crime_type', models.CharField(blank=True, default='', max_length=100)),
                ('platform', models.CharField(blank=True, default='', max_length=100)),
                ('url', models.CharField(blank=True, default='', max_length=2048)),
                ('contact_method', models.CharField(blank=True, default='', max_length=100)),
                ('suspect_info', models.TextField(blank=True, default='')),
                ('estimated_loss', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('currency', models.CharField(default='AOA', max_length=3)),
            ],
            options={
                'verbose_name': 'Cyber Crime Details',
                'verbose_name_plural': 'Cyber Crime Details',
            },
        ),
    ]
