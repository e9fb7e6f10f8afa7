import datetime

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import records.models


class Migration(migrations.Migration):

    dependencies = [
        ('records', '0002_seed_diseases'),
    ]

    operations = [
        migrations.AddField(
            model_name='user',
            name='status',
            field=models.CharField(choices=[('pending', 'Pending approval'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='approved', max_length=10),
        ),
        migrations.AddField(
            model_name='user',
            name='rejection_reason',
            field=models.CharField(blank=True, max_length=255),
        ),
        migrations.CreateModel(
            name='PatientMedicalHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('condition', models.CharField(max_length=255)),
                ('diagnosis_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('Ongoing', 'Ongoing'), ('Resolved', 'Resolved'), ('In Remission', 'In Remission'), ('Chronic', 'Chronic'), ('Acute', 'Acute')], default='Ongoing', max_length=20)),
                ('severity', models.CharField(choices=[('Mild', 'Mild'), ('Moderate', 'Moderate'), ('Severe', 'Severe'), ('Life-threatening', 'Life-threatening')], default='Moderate', max_length=20)),
                ('diagnosed_by', models.CharField(blank=True, max_length=255)),
                ('treatment_history', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medical_history', to='records.patient')),
            ],
            options={
                'verbose_name_plural': 'patient medical history',
            },
        ),
        migrations.CreateModel(
            name='PatientDocument',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('document_type', models.CharField(choices=[('Medical Report', 'Medical Report'), ('Lab Result', 'Lab Result'), ('Imaging Result', 'Imaging Result'), ('Prescription', 'Prescription'), ('Discharge Summary', 'Discharge Summary'), ('Referral Letter', 'Referral Letter'), ('Consent Form', 'Consent Form'), ('Insurance Document', 'Insurance Document'), ('ID Document', 'ID Document'), ('Other', 'Other')], default='Other', max_length=30)),
                ('document_date', models.DateField(default=datetime.date.today)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('source', models.CharField(blank=True, help_text='Issuing authority', max_length=255)),
                ('confidential', models.BooleanField(default=False)),
                ('file', models.FileField(max_length=255, upload_to=records.models._document_upload)),
                ('file_name', models.CharField(blank=True, max_length=255)),
                ('content_type', models.CharField(blank=True, max_length=100)),
                ('size', models.PositiveIntegerField(default=0)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='documents', to='records.patient')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
