from django.db import migrations

NOTIFIABLE_DISEASES = [
    ('covid-19', 'COVID-19', 'Viral'),
    ('malaria', 'Malaria', 'Parasitic'),
    ('tuberculosis', 'Tuberculosis', 'Bacterial'),
    ('cholera', 'Cholera', 'Bacterial'),
    ('typhoid', 'Typhoid Fever', 'Bacterial'),
    ('measles', 'Measles', 'Viral'),
    ('meningitis', 'Meningitis', 'Bacterial'),
    ('hepatitis-b', 'Hepatitis B', 'Viral'),
    ('yellow-fever', 'Yellow Fever', 'Viral'),
    ('lassa-fever', 'Lassa Fever', 'Viral'),
    ('ebola', 'Ebola Virus Disease', 'Viral'),
    ('hiv-aids', 'HIV/AIDS', 'Viral'),
]


def seed(apps, schema_editor):
    Disease = apps.get_model('records', 'Disease')
    for slug, name, kind in NOTIFIABLE_DISEASES:
        Disease.objects.update_or_create(id=slug, defaults={'name': name, 'disease_type': kind})


def unseed(apps, schema_editor):
    Disease = apps.get_model('records', 'Disease')
    Disease.objects.filter(id__in=[d[0] for d in NOTIFIABLE_DISEASES], cases__isnull=True,
                           outbreaks__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('records', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed, unseed),
    ]
