# Initial schema for clinic license verification

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ClinicLicense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('clinic_name', models.CharField(help_text='Registered clinic name', max_length=255)),
                ('license_number', models.CharField(help_text='Unique license number (stored upper-case, e.g. JOR-DEN-001)', max_length=20, unique=True, validators=[django.core.validators.RegexValidator('^[A-Z0-9-]{5,20}$', 'License number must be 5-20 characters of letters, digits and hyphens')])),
                ('doctor_name', models.CharField(blank=True, max_length=255, null=True)),
                ('specialization', models.CharField(help_text='Clinic specialization', max_length=255)),
                ('license_status', models.CharField(choices=[('active', 'Active'), ('expired', 'Expired'), ('suspended', 'Suspended'), ('pending', 'Pending Review')], default='active', max_length=10)),
                ('issue_date', models.DateField(blank=True, null=True)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('phone', models.CharField(blank=True, max_length=50, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('qr_code', models.TextField(blank=True, null=True)),
                ('verification_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Clinic License',
                'verbose_name_plural': 'Clinic Licenses',
                'db_table': 'clinics',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='SiteSetting',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.TextField(blank=True, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'site_settings',
                'ordering': ['key'],
            },
        ),
        migrations.CreateModel(
            name='Specialization',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name_ar', models.CharField(max_length=150)),
                ('name_en', models.CharField(blank=True, max_length=150, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'specializations',
                'ordering': ['sort_order', 'name_ar'],
            },
        ),
        migrations.CreateModel(
            name='VerificationAttempt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('license_number', models.CharField(help_text='Normalized license number that was checked', max_length=100)),
                ('verification_method', models.CharField(choices=[('qr_scan', 'QR Scan'), ('manual_entry', 'Manual Entry'), ('image_upload', 'Image Upload')], help_text='Input channel used for the attempt', max_length=20)),
                ('verification_status', models.CharField(choices=[('success', 'License Found'), ('not_found', 'License Not Found'), ('failed', 'Verification Failed')], help_text='Outcome classification', max_length=20)),
                ('ip_address', models.GenericIPAddressField(blank=True, help_text='IP address of verification attempt', null=True)),
                ('user_agent', models.CharField(blank=True, default='', help_text='User agent of verification attempt', max_length=500)),
                ('location_data', models.JSONField(blank=True, help_text='Optional client-reported location', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When the attempt was made')),
                ('clinic', models.ForeignKey(blank=True, help_text='Matched clinic (null if no clinic matched)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verifications', to='clinics.cliniclicense')),
            ],
            options={
                'verbose_name': 'Verification Attempt',
                'verbose_name_plural': 'Verification Attempts',
                'db_table': 'verifications',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='cliniclicense',
            index=models.Index(fields=['license_status'], name='clinic_status_idx'),
        ),
        migrations.AddIndex(
            model_name='cliniclicense',
            index=models.Index(fields=['expiry_date'], name='clinic_expiry_idx'),
        ),
        migrations.AddIndex(
            model_name='verificationattempt',
            index=models.Index(fields=['clinic', '-created_at'], name='verif_clinic_idx'),
        ),
        migrations.AddIndex(
            model_name='verificationattempt',
            index=models.Index(fields=['verification_status', '-created_at'], name='verif_status_idx'),
        ),
        migrations.AddIndex(
            model_name='verificationattempt',
            index=models.Index(fields=['ip_address', '-created_at'], name='verif_ip_idx'),
        ),
    ]
