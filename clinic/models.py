"""
Database models for the hospital management backend.

One table per entity.  Relationships are plain foreign keys (never
embedded documents) and every record carries ``created_at`` /
``updated_at`` timestamps.  Choice constants live on the model that owns
them so services and views can refer to e.g. ``Bed.STATUS_OCCUPIED``
instead of repeating string literals.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Role(models.TextChoices):
    """Closed set of user roles used by the capability table."""
    PATIENT = 'Patient', 'Patient'
    DOCTOR = 'Doctor', 'Doctor'
    RECEPTIONIST = 'Receptionist', 'Receptionist'
    PHARMACIST = 'Pharmacist', 'Pharmacist'
    ADMIN = 'Admin', 'Admin'
    HR = 'HR', 'HR'


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UserManager(BaseUserManager):
    """Manager for the email-identified user model.

    ``username`` is kept from :class:`AbstractUser` for admin
    compatibility and mirrors the email address.
    """
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('email is required')
        email = self.normalize_email(email).lower()
        extra_fields.setdefault('username', email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Any person who can sign in: patients and every kind of staff."""
    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
    ]
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PATIENT, db_index=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    # Only meaningful for doctors
    doctor_department = models.CharField(max_length=128, blank=True)
    profile_image = models.URLField(max_length=512, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS: list[str] = []

    objects = UserManager()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Appointment(TimestampedModel):
    STATUS_PENDING = 'Pending'
    STATUS_CONFIRMED = 'Confirmed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_COMPLETED, 'Completed'),
    ]
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='patient_appointments')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='doctor_appointments')
    appointment_date = models.DateTimeField()
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'appointment_date'], name='clinic_appo_patient_5b1c1e_idx'),
            models.Index(fields=['doctor', 'appointment_date'], name='clinic_appo_doctor__0f6a2d_idx'),
        ]

    def __str__(self) -> str:
        return f"appt {self.id} p={self.patient_id} d={self.doctor_id} {self.status}"


class Invoice(TimestampedModel):
    TYPE_CONSULTATION = 'Consultation'
    TYPE_PHARMACY = 'Pharmacy'
    TYPE_BED = 'Bed'
    TYPE_CHOICES = [
        (TYPE_CONSULTATION, 'Consultation'),
        (TYPE_PHARMACY, 'Pharmacy'),
        (TYPE_BED, 'Bed'),
    ]
    STATUS_UNPAID = 'Unpaid'
    STATUS_PAID = 'Paid'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_CHOICES = [
        (STATUS_UNPAID, 'Unpaid'),
        (STATUS_PAID, 'Paid'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='invoices')
    doctor = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_invoices')
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='created_invoices')
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='invoices')
    invoice_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_CONSULTATION)
    # [{"description": str, "cost": number}, ...]
    items = models.JSONField(default=list)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_UNPAID, db_index=True)
    date = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"invoice {self.id} {self.invoice_type} {self.total} ({self.status})"


class Medicine(TimestampedModel):
    name = models.CharField(max_length=255, db_index=True)
    category = models.CharField(max_length=128)
    stock = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    expiry_date = models.DateField()
    supplier = models.CharField(max_length=255, blank=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=models.Q(stock__gte=0), name='medicine_stock_non_negative'),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.stock})"


class Prescription(TimestampedModel):
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='written_prescriptions')
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='prescriptions')
    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name='prescriptions')
    diagnosis = models.TextField()
    # [{"name", "dosage", "duration", "instructions"}, ...]
    medicines = models.JSONField(default=list)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"rx {self.id} d={self.doctor_id} p={self.patient_id}"


class LabReport(TimestampedModel):
    CATEGORY_CHOICES = [
        ('Blood Test', 'Blood Test'),
        ('Urine Test', 'Urine Test'),
        ('X-Ray', 'X-Ray'),
        ('MRI', 'MRI'),
        ('CT Scan', 'CT Scan'),
        ('Ultrasound', 'Ultrasound'),
        ('ECG', 'ECG'),
        ('Other', 'Other'),
    ]
    STATUS_ORDERED = 'Ordered'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_COMPLETED = 'Completed'
    STATUS_CHOICES = [
        (STATUS_ORDERED, 'Ordered'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
    ]
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='lab_reports')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='doctor_lab_reports')
    ordered_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='ordered_lab_reports')
    test_name = models.CharField(max_length=255)
    test_category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, default='Blood Test')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ORDERED, db_index=True)
    results = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:
        return f"{self.test_name} p={self.patient_id} ({self.status})"


class MedicalHistory(TimestampedModel):
    TYPE_CHOICES = [
        ('Diagnosis', 'Diagnosis'),
        ('Allergy', 'Allergy'),
        ('Surgery', 'Surgery'),
        ('Chronic Condition', 'Chronic Condition'),
        ('Family History', 'Family History'),
        ('Vaccination', 'Vaccination'),
        ('Other', 'Other'),
    ]
    SEVERITY_CHOICES = [
        ('Mild', 'Mild'),
        ('Moderate', 'Moderate'),
        ('Severe', 'Severe'),
        ('Critical', 'Critical'),
        ('N/A', 'N/A'),
    ]
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='medical_history')
    added_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='authored_medical_history')
    type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    severity = models.CharField(max_length=16, choices=SEVERITY_CHOICES, default='N/A')
    date_recorded = models.DateTimeField()
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name_plural = 'medical history'

    def __str__(self) -> str:
        return f"{self.type}: {self.title} p={self.patient_id}"


class Bed(TimestampedModel):
    """A bed in a ward.

    An Occupied bed always has a patient and an admission date; discharge
    clears both.  Maintenance and Reserved are administrative states that
    can only be entered while the bed is not Occupied.
    """
    WARD_CHOICES = [
        ('General', 'General'),
        ('ICU', 'ICU'),
        ('Private', 'Private'),
        ('Semi-Private', 'Semi-Private'),
        ('Emergency', 'Emergency'),
        ('Maternity', 'Maternity'),
        ('Pediatric', 'Pediatric'),
    ]
    STATUS_AVAILABLE = 'Available'
    STATUS_OCCUPIED = 'Occupied'
    STATUS_MAINTENANCE = 'Maintenance'
    STATUS_RESERVED = 'Reserved'
    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_OCCUPIED, 'Occupied'),
        (STATUS_MAINTENANCE, 'Maintenance'),
        (STATUS_RESERVED, 'Reserved'),
    ]
    DEFAULT_DAILY_RATE = 500

    room_number = models.CharField(max_length=32)
    bed_number = models.CharField(max_length=32)
    ward = models.CharField(max_length=16, choices=WARD_CHOICES, default='General')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_AVAILABLE, db_index=True)
    patient = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='beds')
    assigned_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='assigned_beds')
    admission_date = models.DateTimeField(null=True, blank=True)
    discharge_date = models.DateTimeField(null=True, blank=True)
    daily_rate = models.DecimalField(max_digits=10, decimal_places=2, default=DEFAULT_DAILY_RATE)
    notes = models.TextField(blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['room_number', 'bed_number'], name='unique_room_bed'),
        ]

    def __str__(self) -> str:
        return f"Room {self.room_number} Bed {self.bed_number} ({self.status})"


class Notification(TimestampedModel):
    TYPE_CHOICES = [
        ('appointment', 'appointment'),
        ('lab_report', 'lab_report'),
        ('prescription', 'prescription'),
        ('billing', 'billing'),
        ('general', 'general'),
        ('bed', 'bed'),
        ('system', 'system'),
        ('leave', 'leave'),
    ]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=16, choices=TYPE_CHOICES, default='general')
    is_read = models.BooleanField(default=False)
    link = models.CharField(max_length=255, blank=True)

    class Meta:
        indexes = [models.Index(fields=['user', 'created_at'], name='clinic_noti_user_id_3c9e47_idx')]

    def __str__(self) -> str:
        return f"notif {self.id} u={self.user_id} {self.title}"


class Message(TimestampedModel):
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sent_messages')
    receiver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='received_messages')
    message = models.TextField()
    read = models.BooleanField(default=False)

    class Meta:
        indexes = [
            models.Index(fields=['sender', 'receiver'], name='clinic_mess_sender__8d2f1a_idx'),
            models.Index(fields=['receiver', 'sender'], name='clinic_mess_receive_4e7b90_idx'),
        ]

    def __str__(self) -> str:
        return f"msg {self.id} {self.sender_id}->{self.receiver_id}"


class ActivityLog(TimestampedModel):
    """Append-only audit trail."""
    ACTION_CHOICES = [(a, a) for a in (
        'CREATE', 'UPDATE', 'DELETE', 'LOGIN', 'LOGOUT', 'VIEW',
        'UPLOAD', 'DOWNLOAD', 'STATUS_CHANGE', 'CHECK_IN', 'CHECK_OUT',
    )]
    ENTITY_CHOICES = [(e, e) for e in (
        'Patient', 'Doctor', 'Appointment', 'Invoice', 'Medicine', 'Prescription',
        'LabReport', 'MedicalHistory', 'Bed', 'Notification', 'User', 'Profile',
        'Attendance', 'Review', 'Leave',
    )]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='activity_logs')
    action = models.CharField(max_length=16, choices=ACTION_CHOICES)
    entity = models.CharField(max_length=32, choices=ENTITY_CHOICES)
    entity_id = models.CharField(max_length=64, blank=True)
    details = models.TextField(blank=True)
    ip_address = models.CharField(max_length=64, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=['created_at'], name='clinic_acti_created_a1d5c3_idx'),
            models.Index(fields=['user', 'created_at'], name='clinic_acti_user_id_6f0e2b_idx'),
            models.Index(fields=['entity', 'action'], name='clinic_acti_entity_9b3d74_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.entity}#{self.entity_id} by {self.user_id}"


class Attendance(TimestampedModel):
    STATUS_PRESENT = 'Present'
    STATUS_LATE = 'Late'
    STATUS_HALF_DAY = 'Half-Day'
    STATUS_ABSENT = 'Absent'
    STATUS_CHOICES = [
        (STATUS_PRESENT, 'Present'),
        (STATUS_LATE, 'Late'),
        (STATUS_HALF_DAY, 'Half-Day'),
        (STATUS_ABSENT, 'Absent'),
    ]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='attendance')
    # Local calendar day, YYYY-MM-DD
    date = models.CharField(max_length=10)
    check_in = models.DateTimeField()
    check_out = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PRESENT)
    hours_worked = models.FloatField(default=0)
    notes = models.TextField(blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['user', 'date'], name='unique_attendance_per_day'),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}@{self.date} {self.status}"


class Leave(TimestampedModel):
    TYPE_CHOICES = [
        ('Sick Leave', 'Sick Leave'),
        ('Casual Leave', 'Casual Leave'),
        ('Emergency Leave', 'Emergency Leave'),
        ('Vacation', 'Vacation'),
        ('Other', 'Other'),
    ]
    STATUS_PENDING = 'Pending'
    STATUS_APPROVED = 'Approved'
    STATUS_REJECTED = 'Rejected'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='leaves')
    leave_type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    admin_comment = models.TextField(blank=True)
    approved_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='approved_leaves')

    def __str__(self) -> str:
        return f"{self.leave_type} u={self.user_id} ({self.status})"


class Review(TimestampedModel):
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reviews_written')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reviews')
    appointment = models.OneToOneField(Appointment, on_delete=models.CASCADE, related_name='review')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.CharField(max_length=500, blank=True)

    def __str__(self) -> str:
        return f"review {self.rating}* d={self.doctor_id} appt={self.appointment_id}"
