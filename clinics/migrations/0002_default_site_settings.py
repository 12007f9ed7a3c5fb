# Seed the editable footer settings

from django.db import migrations


DEFAULT_SETTINGS = [
    ('footer_title', 'Clinic License Verification', 'Footer heading'),
    ('footer_description', 'Verify the license of any registered dental or medical clinic.', 'Footer description text'),
    ('footer_features', 'QR scan, image upload and manual license lookup', 'Footer feature list'),
    ('footer_developer_name', '', 'Developer name shown in the footer'),
    ('footer_developer_title', '', 'Developer title shown in the footer'),
    ('footer_organization', '', 'Issuing organization'),
    ('footer_copyright', 'All rights reserved', 'Copyright line'),
]


def create_default_settings(apps, schema_editor):
    SiteSetting = apps.get_model('clinics', 'SiteSetting')
    for key, value, description in DEFAULT_SETTINGS:
        SiteSetting.objects.get_or_create(key=key, defaults={'value': value, 'description': description})


def remove_default_settings(apps, schema_editor):
    SiteSetting = apps.get_model('clinics', 'SiteSetting')
    SiteSetting.objects.filter(key__in=[key for key, _, _ in DEFAULT_SETTINGS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('clinics', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_default_settings, remove_default_settings),
    ]
