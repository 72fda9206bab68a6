import clinic.models
import django.contrib.auth.validators
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def _stamps():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def _id():
    return ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID'))


def _user_fk(related_name, null=False):
    if null:
        return models.ForeignKey(
            blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
            related_name=related_name, to=settings.AUTH_USER_MODEL,
        )
    return models.ForeignKey(
        on_delete=django.db.models.deletion.CASCADE, related_name=related_name, to=settings.AUTH_USER_MODEL,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                _id(),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('role', models.CharField(choices=[('Patient', 'Patient'), ('Doctor', 'Doctor'), ('Receptionist', 'Receptionist'), ('Pharmacist', 'Pharmacist'), ('Admin', 'Admin'), ('HR', 'HR')], db_index=True, default='Patient', max_length=16)),
                ('gender', models.CharField(blank=True, choices=[('Male', 'Male'), ('Female', 'Female'), ('Other', 'Other')], max_length=10)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('doctor_department', models.CharField(blank=True, max_length=128)),
                ('profile_image', models.URLField(blank=True, max_length=512)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', clinic.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Appointment',
            fields=[
                _id(),
                *_stamps(),
                ('appointment_date', models.DateTimeField()),
                ('reason', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Confirmed', 'Confirmed'), ('Cancelled', 'Cancelled'), ('Completed', 'Completed')], db_index=True, default='Pending', max_length=16)),
                ('doctor', _user_fk('doctor_appointments')),
                ('patient', _user_fk('patient_appointments')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['patient', 'appointment_date'], name='clinic_appo_patient_5b1c1e_idx'),
                    models.Index(fields=['doctor', 'appointment_date'], name='clinic_appo_doctor__0f6a2d_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Medicine',
            fields=[
                _id(),
                *_stamps(),
                ('name', models.CharField(db_index=True, max_length=255)),
                ('category', models.CharField(max_length=128)),
                ('stock', models.PositiveIntegerField(default=0)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('expiry_date', models.DateField()),
                ('supplier', models.CharField(blank=True, max_length=255)),
            ],
            options={
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('stock__gte', 0)), name='medicine_stock_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Invoice',
            fields=[
                _id(),
                *_stamps(),
                ('invoice_type', models.CharField(choices=[('Consultation', 'Consultation'), ('Pharmacy', 'Pharmacy'), ('Bed', 'Bed')], default='Consultation', max_length=16)),
                ('items', models.JSONField(default=list)),
                ('total', models.DecimalField(decimal_places=2, max_digits=12)),
                ('status', models.CharField(choices=[('Unpaid', 'Unpaid'), ('Paid', 'Paid'), ('Cancelled', 'Cancelled')], db_index=True, default='Unpaid', max_length=16)),
                ('date', models.DateTimeField(auto_now_add=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoices', to='clinic.appointment')),
                ('created_by', _user_fk('created_invoices', null=True)),
                ('doctor', _user_fk('doctor_invoices', null=True)),
                ('patient', _user_fk('invoices')),
            ],
        ),
        migrations.CreateModel(
            name='Prescription',
            fields=[
                _id(),
                *_stamps(),
                ('diagnosis', models.TextField()),
                ('medicines', models.JSONField(default=list)),
                ('notes', models.TextField(blank=True)),
                ('appointment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='prescriptions', to='clinic.appointment')),
                ('doctor', _user_fk('written_prescriptions')),
                ('patient', _user_fk('prescriptions')),
            ],
        ),
        migrations.CreateModel(
            name='LabReport',
            fields=[
                _id(),
                *_stamps(),
                ('test_name', models.CharField(max_length=255)),
                ('test_category', models.CharField(choices=[('Blood Test', 'Blood Test'), ('Urine Test', 'Urine Test'), ('X-Ray', 'X-Ray'), ('MRI', 'MRI'), ('CT Scan', 'CT Scan'), ('Ultrasound', 'Ultrasound'), ('ECG', 'ECG'), ('Other', 'Other')], default='Blood Test', max_length=32)),
                ('status', models.CharField(choices=[('Ordered', 'Ordered'), ('In Progress', 'In Progress'), ('Completed', 'Completed')], db_index=True, default='Ordered', max_length=16)),
                ('results', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('doctor', _user_fk('doctor_lab_reports')),
                ('ordered_by', _user_fk('ordered_lab_reports', null=True)),
                ('patient', _user_fk('lab_reports')),
            ],
        ),
        migrations.CreateModel(
            name='MedicalHistory',
            fields=[
                _id(),
                *_stamps(),
                ('type', models.CharField(choices=[('Diagnosis', 'Diagnosis'), ('Allergy', 'Allergy'), ('Surgery', 'Surgery'), ('Chronic Condition', 'Chronic Condition'), ('Family History', 'Family History'), ('Vaccination', 'Vaccination'), ('Other', 'Other')], max_length=32)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('severity', models.CharField(choices=[('Mild', 'Mild'), ('Moderate', 'Moderate'), ('Severe', 'Severe'), ('Critical', 'Critical'), ('N/A', 'N/A')], default='N/A', max_length=16)),
                ('date_recorded', models.DateTimeField()),
                ('is_active', models.BooleanField(default=True)),
                ('added_by', _user_fk('authored_medical_history')),
                ('patient', _user_fk('medical_history')),
            ],
            options={
                'verbose_name_plural': 'medical history',
            },
        ),
        migrations.CreateModel(
            name='Bed',
            fields=[
                _id(),
                *_stamps(),
                ('room_number', models.CharField(max_length=32)),
                ('bed_number', models.CharField(max_length=32)),
                ('ward', models.CharField(choices=[('General', 'General'), ('ICU', 'ICU'), ('Private', 'Private'), ('Semi-Private', 'Semi-Private'), ('Emergency', 'Emergency'), ('Maternity', 'Maternity'), ('Pediatric', 'Pediatric')], default='General', max_length=16)),
                ('status', models.CharField(choices=[('Available', 'Available'), ('Occupied', 'Occupied'), ('Maintenance', 'Maintenance'), ('Reserved', 'Reserved')], db_index=True, default='Available', max_length=16)),
                ('admission_date', models.DateTimeField(blank=True, null=True)),
                ('discharge_date', models.DateTimeField(blank=True, null=True)),
                ('daily_rate', models.DecimalField(decimal_places=2, default=500, max_digits=10)),
                ('notes', models.TextField(blank=True)),
                ('assigned_by', _user_fk('assigned_beds', null=True)),
                ('patient', _user_fk('beds', null=True)),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('room_number', 'bed_number'), name='unique_room_bed'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                _id(),
                *_stamps(),
                ('title', models.CharField(max_length=255)),
                ('message', models.TextField()),
                ('type', models.CharField(choices=[('appointment', 'appointment'), ('lab_report', 'lab_report'), ('prescription', 'prescription'), ('billing', 'billing'), ('general', 'general'), ('bed', 'bed'), ('system', 'system'), ('leave', 'leave')], default='general', max_length=16)),
                ('is_read', models.BooleanField(default=False)),
                ('link', models.CharField(blank=True, max_length=255)),
                ('user', _user_fk('notifications')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['user', 'created_at'], name='clinic_noti_user_id_3c9e47_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Message',
            fields=[
                _id(),
                *_stamps(),
                ('message', models.TextField()),
                ('read', models.BooleanField(default=False)),
                ('receiver', _user_fk('received_messages')),
                ('sender', _user_fk('sent_messages')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['sender', 'receiver'], name='clinic_mess_sender__8d2f1a_idx'),
                    models.Index(fields=['receiver', 'sender'], name='clinic_mess_receive_4e7b90_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ActivityLog',
            fields=[
                _id(),
                *_stamps(),
                ('action', models.CharField(choices=[(a, a) for a in ('CREATE', 'UPDATE', 'DELETE', 'LOGIN', 'LOGOUT', 'VIEW', 'UPLOAD', 'DOWNLOAD', 'STATUS_CHANGE', 'CHECK_IN', 'CHECK_OUT')], max_length=16)),
                ('entity', models.CharField(choices=[(e, e) for e in ('Patient', 'Doctor', 'Appointment', 'Invoice', 'Medicine', 'Prescription', 'LabReport', 'MedicalHistory', 'Bed', 'Notification', 'User', 'Profile', 'Attendance', 'Review', 'Leave')], max_length=32)),
                ('entity_id', models.CharField(blank=True, max_length=64)),
                ('details', models.TextField(blank=True)),
                ('ip_address', models.CharField(blank=True, max_length=64)),
                ('user', _user_fk('activity_logs')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['created_at'], name='clinic_acti_created_a1d5c3_idx'),
                    models.Index(fields=['user', 'created_at'], name='clinic_acti_user_id_6f0e2b_idx'),
                    models.Index(fields=['entity', 'action'], name='clinic_acti_entity_9b3d74_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Attendance',
            fields=[
                _id(),
                *_stamps(),
                ('date', models.CharField(max_length=10)),
                ('check_in', models.DateTimeField()),
                ('check_out', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('Present', 'Present'), ('Late', 'Late'), ('Half-Day', 'Half-Day'), ('Absent', 'Absent')], default='Present', max_length=16)),
                ('hours_worked', models.FloatField(default=0)),
                ('notes', models.TextField(blank=True)),
                ('user', _user_fk('attendance')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'date'), name='unique_attendance_per_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Leave',
            fields=[
                _id(),
                *_stamps(),
                ('leave_type', models.CharField(choices=[('Sick Leave', 'Sick Leave'), ('Casual Leave', 'Casual Leave'), ('Emergency Leave', 'Emergency Leave'), ('Vacation', 'Vacation'), ('Other', 'Other')], max_length=32)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('reason', models.TextField()),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Approved', 'Approved'), ('Rejected', 'Rejected')], db_index=True, default='Pending', max_length=16)),
                ('admin_comment', models.TextField(blank=True)),
                ('approved_by', _user_fk('approved_leaves', null=True)),
                ('user', _user_fk('leaves')),
            ],
        ),
        migrations.CreateModel(
            name='Review',
            fields=[
                _id(),
                *_stamps(),
                ('rating', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('comment', models.CharField(blank=True, max_length=500)),
                ('appointment', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='review', to='clinic.appointment')),
                ('doctor', _user_fk('reviews')),
                ('patient', _user_fk('reviews_written')),
            ],
        ),
    ]
