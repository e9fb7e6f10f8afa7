import datetime

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Facility',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('facility_type', models.CharField(choices=[('hospital', 'Hospital'), ('clinic', 'Clinic'), ('health_center', 'Health Center'), ('maternity', 'Maternity')], db_index=True, default='health_center', max_length=20)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('lga', models.CharField(blank=True, db_index=True, max_length=100)),
                ('state', models.CharField(default='Akwa Ibom', max_length=100)),
                ('contact_person', models.CharField(blank=True, max_length=255)),
                ('phone_number', models.CharField(blank=True, max_length=32)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('ownership', models.CharField(default='Government', max_length=50)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], db_index=True, default='active', max_length=20)),
                ('latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='Disease',
            fields=[
                ('id', models.CharField(help_text="Slug such as 'lassa-fever'", max_length=50, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('disease_type', models.CharField(blank=True, max_length=50)),
            ],
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('admin', 'Administrator'), ('supervisor', 'Supervisor'), ('doctor', 'Doctor'), ('staff', 'Records Staff')], default='staff', max_length=12)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='records.facility')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('other_names', models.CharField(blank=True, max_length=100)),
                ('gender', models.CharField(choices=[('Male', 'Male'), ('Female', 'Female')], max_length=10)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('phone_number', models.CharField(blank=True, max_length=32)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(default='Akwa Ibom', max_length=100)),
                ('lga', models.CharField(blank=True, max_length=100)),
                ('location', models.CharField(blank=True, choices=[('Urban', 'Urban'), ('Rural', 'Rural')], max_length=10)),
                ('blood_group', models.CharField(blank=True, max_length=5)),
                ('genotype', models.CharField(blank=True, max_length=5)),
                ('marital_status', models.CharField(blank=True, max_length=20)),
                ('next_of_kin_name', models.CharField(blank=True, max_length=255)),
                ('next_of_kin_relationship', models.CharField(blank=True, max_length=50)),
                ('next_of_kin_phone', models.CharField(blank=True, max_length=32)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], db_index=True, default='active', max_length=10)),
                ('registration_date', models.DateField(default=datetime.date.today)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='patients', to='records.facility')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PatientVisit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('visit_date', models.DateField()),
                ('purpose', models.CharField(max_length=255)),
                ('diagnosis', models.CharField(blank=True, max_length=255)),
                ('treatment', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True)),
                ('vital_signs', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='patient_visits', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visits', to='records.patient')),
            ],
        ),
        migrations.CreateModel(
            name='Birth',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('child_name', models.CharField(blank=True, max_length=255)),
                ('gender', models.CharField(choices=[('male', 'Male'), ('female', 'Female')], max_length=10)),
                ('date_of_birth', models.DateField(db_index=True)),
                ('time_of_birth', models.TimeField(blank=True, null=True)),
                ('delivery_method', models.CharField(choices=[('hospital', 'Hospital'), ('home', 'Home')], default='hospital', max_length=10)),
                ('birth_type', models.CharField(choices=[('singleton', 'Singleton'), ('twin', 'Twin'), ('triplet', 'Triplet')], default='singleton', max_length=10)),
                ('birth_weight', models.DecimalField(blank=True, decimal_places=2, max_digits=4, null=True)),
                ('birth_length', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('mother_name', models.CharField(max_length=255)),
                ('mother_age', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('father_name', models.CharField(blank=True, max_length=255)),
                ('father_age', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('lga_residence', models.CharField(blank=True, max_length=100)),
                ('state_residence', models.CharField(default='Akwa Ibom', max_length=100)),
                ('nationality', models.CharField(default='Nigerian', max_length=50)),
                ('status', models.CharField(choices=[('registered', 'Registered'), ('pending', 'Pending')], db_index=True, default='registered', max_length=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='births', to='records.facility')),
                ('mother', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='births', to='records.patient')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Death',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('deceased_name', models.CharField(max_length=255)),
                ('gender', models.CharField(choices=[('Male', 'Male'), ('Female', 'Female')], max_length=10)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('date_of_death', models.DateField(db_index=True)),
                ('age_at_death', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('place_of_death', models.CharField(choices=[('Home', 'Home'), ('Hospital', 'Hospital'), ('Other', 'Other')], default='Hospital', max_length=20)),
                ('hospital_name', models.CharField(blank=True, max_length=255)),
                ('cause_of_death', models.CharField(max_length=255)),
                ('manner_of_death', models.CharField(choices=[('Natural', 'Natural'), ('Accident', 'Accident'), ('Homicide', 'Homicide'), ('Suicide', 'Suicide'), ('Undetermined', 'Undetermined')], default='Natural', max_length=20)),
                ('informant_name', models.CharField(blank=True, max_length=255)),
                ('informant_relationship', models.CharField(blank=True, max_length=50)),
                ('informant_phone', models.CharField(blank=True, max_length=32)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(default='Akwa Ibom', max_length=100)),
                ('lga', models.CharField(blank=True, max_length=100)),
                ('registration_date', models.DateField(default=datetime.date.today)),
                ('status', models.CharField(choices=[('registered', 'Registered'), ('pending', 'Pending')], db_index=True, default='registered', max_length=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='deaths', to='records.facility')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='AntenatalRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('registration_date', models.DateField(default=datetime.date.today)),
                ('lmp', models.DateField(help_text='First day of the last menstrual period')),
                ('edd', models.DateField(blank=True, help_text='Estimated date of delivery', null=True)),
                ('gravida', models.PositiveSmallIntegerField(default=1)),
                ('para', models.PositiveSmallIntegerField(default=0)),
                ('blood_group', models.CharField(blank=True, max_length=5)),
                ('height_cm', models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ('pre_pregnancy_weight', models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ('hiv_status', models.CharField(blank=True, max_length=20)),
                ('sickling_status', models.CharField(blank=True, max_length=20)),
                ('hepatitis_b_status', models.CharField(blank=True, max_length=20)),
                ('hepatitis_c_status', models.CharField(blank=True, max_length=20)),
                ('vdrl_status', models.CharField(blank=True, max_length=20)),
                ('tetanus_vaccination', models.CharField(blank=True, max_length=30)),
                ('malaria_prophylaxis', models.CharField(blank=True, max_length=30)),
                ('iron_folate_supplementation', models.CharField(blank=True, max_length=30)),
                ('risk_factors', models.JSONField(blank=True, default=list)),
                ('risk_level', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], db_index=True, default='low', max_length=10)),
                ('medical_history', models.TextField(blank=True)),
                ('obstetrics_history', models.TextField(blank=True)),
                ('partner', models.JSONField(blank=True, default=dict)),
                ('emergency_contact', models.JSONField(blank=True, default=dict)),
                ('nearest_health_facility', models.CharField(blank=True, max_length=255)),
                ('outcome', models.CharField(blank=True, max_length=50)),
                ('delivery_date', models.DateField(blank=True, null=True)),
                ('mode_of_delivery', models.CharField(blank=True, max_length=50)),
                ('birth_outcome', models.CharField(blank=True, max_length=50)),
                ('status', models.CharField(choices=[('active', 'Active'), ('delivered', 'Delivered'), ('transferred', 'Transferred'), ('inactive', 'Inactive')], db_index=True, default='active', max_length=12)),
                ('next_appointment', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='antenatal_records', to='records.facility')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='antenatal_records', to='records.patient')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='AntenatalVisit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('visit_number', models.PositiveSmallIntegerField()),
                ('visit_date', models.DateField()),
                ('gestational_age', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('weight_kg', models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ('blood_pressure', models.CharField(blank=True, max_length=15)),
                ('fundal_height_cm', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('fetal_heart_rate', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('fetal_movement', models.CharField(blank=True, max_length=20)),
                ('urine_test', models.CharField(blank=True, max_length=50)),
                ('hemoglobin', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('complaints', models.TextField(blank=True)),
                ('interventions', models.TextField(blank=True)),
                ('next_appointment', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('provider', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visits', to='records.antenatalrecord')),
            ],
            options={
                'unique_together': {('record', 'visit_number')},
            },
        ),
        migrations.CreateModel(
            name='Immunization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('vaccine_type', models.CharField(db_index=True, max_length=50)),
                ('dose_number', models.PositiveSmallIntegerField(default=1)),
                ('lot_number', models.CharField(blank=True, max_length=50)),
                ('vaccination_date', models.DateField(db_index=True)),
                ('next_due_date', models.DateField(blank=True, null=True)),
                ('healthcare_provider', models.CharField(blank=True, max_length=255)),
                ('provider_id', models.CharField(blank=True, max_length=50)),
                ('status', models.CharField(choices=[('completed', 'Completed'), ('pending', 'Pending'), ('missed', 'Missed')], db_index=True, default='completed', max_length=10)),
                ('side_effects', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True)),
                ('weight_kg', models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ('height_cm', models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ('site_of_administration', models.CharField(blank=True, max_length=50)),
                ('route_of_administration', models.CharField(blank=True, max_length=30)),
                ('age_months', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='immunizations', to='records.facility')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='immunizations', to='records.patient')),
            ],
            options={
                'unique_together': {('patient', 'vaccine_type', 'dose_number')},
            },
        ),
        migrations.CreateModel(
            name='DiseaseCase',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('report_date', models.DateField(db_index=True)),
                ('onset_date', models.DateField(blank=True, null=True)),
                ('diagnosis_date', models.DateField(blank=True, null=True)),
                ('diagnosis_type', models.CharField(blank=True, max_length=50)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('symptoms', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('suspected', 'Suspected'), ('probable', 'Probable'), ('confirmed', 'Confirmed'), ('ruled_out', 'Ruled out')], db_index=True, max_length=12)),
                ('severity', models.CharField(choices=[('mild', 'Mild'), ('moderate', 'Moderate'), ('severe', 'Severe'), ('critical', 'Critical')], default='mild', max_length=10)),
                ('outcome', models.CharField(choices=[('under_treatment', 'Under treatment'), ('recovered', 'Recovered'), ('deceased', 'Deceased'), ('unknown', 'Unknown')], default='under_treatment', max_length=20)),
                ('is_outbreak', models.BooleanField(db_index=True, default=False)),
                ('reported_by', models.CharField(blank=True, max_length=255)),
                ('lab_test_type', models.CharField(blank=True, max_length=100)),
                ('lab_result', models.CharField(blank=True, max_length=50)),
                ('lab_notes', models.TextField(blank=True)),
                ('hospitalized', models.BooleanField(default=False)),
                ('hospital_name', models.CharField(blank=True, max_length=255)),
                ('admission_date', models.DateField(blank=True, null=True)),
                ('discharge_date', models.DateField(blank=True, null=True)),
                ('outcome_date', models.DateField(blank=True, null=True)),
                ('transmission_route', models.CharField(blank=True, max_length=100)),
                ('transmission_location', models.CharField(blank=True, max_length=255)),
                ('travel_history', models.TextField(blank=True)),
                ('contact_history', models.TextField(blank=True)),
                ('treatment', models.TextField(blank=True)),
                ('complications', models.JSONField(blank=True, default=list)),
                ('notes', models.TextField(blank=True)),
                ('reported_to_authorities', models.BooleanField(default=False)),
                ('reported_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('disease', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='cases', to='records.disease')),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='disease_cases', to='records.facility')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='disease_cases', to='records.patient')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='CaseContact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('relationship', models.CharField(blank=True, max_length=50)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('exposure_date', models.DateField(blank=True, null=True)),
                ('follow_up_status', models.CharField(choices=[('pending', 'Pending'), ('monitoring', 'Monitoring'), ('cleared', 'Cleared'), ('symptomatic', 'Symptomatic')], default='pending', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('case', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contacts', to='records.diseasecase')),
            ],
        ),
        migrations.CreateModel(
            name='Outbreak',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lga', models.CharField(blank=True, max_length=100)),
                ('start_date', models.DateField()),
                ('case_count', models.PositiveIntegerField(default=0)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('contained', 'Contained'), ('closed', 'Closed')], db_index=True, default='active', max_length=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('disease', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outbreaks', to='records.disease')),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='outbreaks', to='records.facility')),
                ('reported_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='outbreaks_reported', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='FamilyPlanningClient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('registration_date', models.DateField()),
                ('client_type', models.CharField(choices=[('New Acceptor', 'New Acceptor'), ('Continuing User', 'Continuing User'), ('Restart', 'Restart')], max_length=20)),
                ('marital_status', models.CharField(max_length=20)),
                ('number_of_children', models.PositiveSmallIntegerField(default=0)),
                ('desired_number_of_children', models.PositiveSmallIntegerField(default=0)),
                ('education_level', models.CharField(blank=True, max_length=50)),
                ('occupation', models.CharField(blank=True, max_length=100)),
                ('primary_contact', models.JSONField(blank=True, default=dict)),
                ('medical_history', models.TextField(blank=True)),
                ('allergy_history', models.TextField(blank=True)),
                ('reproductive_history', models.TextField(blank=True)),
                ('menstrual_history', models.TextField(blank=True)),
                ('referred_by', models.CharField(blank=True, max_length=255)),
                ('current_method', models.CharField(blank=True, db_index=True, max_length=50)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('Active', 'Active'), ('Inactive', 'Inactive'), ('Discontinued', 'Discontinued')], db_index=True, default='Active', max_length=15)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('facility', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='family_planning_clients', to='records.facility')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='family_planning', to='records.patient')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.BigIntegerField(blank=True, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('ip', models.GenericIPAddressField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'), models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx')],
            },
        ),
    ]
