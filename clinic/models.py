"""
Database models for the MediCare backend.

Accounts (``User``) and patient records (``Patient``) are deliberately
separate tables: a ``patient`` account is tied to its record only by a
matching email address, and either side may exist without the other.
Clinical rows (appointments, prescriptions, payments, history) hang off
the patient record, which is what ownership checks compare against.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class AccountManager(UserManager):
    """Creates accounts keyed by email; ``username`` mirrors the email."""

    def create_user(self, username=None, email=None, password=None, **extra_fields):
        email = self.normalize_email(email or username or '').lower()
        return super().create_user(email, email, password, **extra_fields)

    def create_superuser(self, username=None, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        email = self.normalize_email(email or username or '').lower()
        return super().create_superuser(email, email, password, **extra_fields)


class User(AbstractUser):
    """An account that can sign in.

    The role is stored on the row and is the only source of truth for
    authorization; it is set at creation and no self-service endpoint
    changes it.
    """
    ROLE_ADMIN = 'admin'
    ROLE_DOCTOR = 'doctor'
    ROLE_RECEPTIONIST = 'receptionist'
    ROLE_PATIENT = 'patient'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_RECEPTIONIST, 'Receptionist'),
        (ROLE_PATIENT, 'Patient'),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    full_name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    # bumped at logout; JWTs carrying an older value are refused
    session_version = models.PositiveIntegerField(default=0)

    objects = AccountManager()

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        if not self.username:
            self.username = self.email
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.email

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Doctor(TimestampedModel):
    """Reference data: a doctor that appointments and prescriptions point at."""
    name = models.CharField(max_length=255)
    specialty = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    qualification = models.CharField(max_length=255, blank=True, null=True)
    experience_years = models.PositiveIntegerField(blank=True, null=True)
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ['name', 'id']

    def __str__(self) -> str:
        return f"Dr. {self.name} ({self.specialty})"


class Patient(TimestampedModel):
    """A patient record.

    ``email`` is what links a ``patient`` account to this record; it is
    unique so an account links to at most one record.
    """
    TYPE_OUTPATIENT = 'outpatient'
    TYPE_INPATIENT = 'inpatient'
    TYPE_CHOICES = [
        (TYPE_OUTPATIENT, 'Outpatient'),
        (TYPE_INPATIENT, 'Inpatient'),
    ]

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True)
    date_of_birth = models.DateField(blank=True, null=True)
    gender = models.CharField(max_length=16, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    blood_group = models.CharField(max_length=8, blank=True, null=True)
    medical_history = models.TextField(blank=True, null=True)
    age = models.PositiveIntegerField(blank=True, null=True)
    patient_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_OUTPATIENT, db_index=True)
    has_diabetes = models.BooleanField(default=False)
    has_hypertension = models.BooleanField(default=False)
    has_sugar_issues = models.BooleanField(default=False)
    family_medical_history = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['name', 'id']

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class Appointment(TimestampedModel):
    STATUS_SCHEDULED = 'scheduled'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='appointments')
    appointment_date = models.DateTimeField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    reason = models.TextField(blank=True, null=True)
    diagnosis = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    symptoms = models.TextField(blank=True, null=True)
    is_emergency = models.BooleanField(default=False)
    appointment_day = models.CharField(max_length=16, blank=True, null=True)
    appointment_time = models.CharField(max_length=8, blank=True, null=True)
    reminder_date = models.DateField(blank=True, null=True)

    class Meta:
        ordering = ['-appointment_date', '-id']
        indexes = [
            models.Index(fields=['patient', 'appointment_date'], name='appt_patient_date_idx'),
            models.Index(fields=['doctor', 'appointment_date'], name='appt_doctor_date_idx'),
        ]

    def __str__(self) -> str:
        return f"appt {self.id} p={self.patient_id} d={self.doctor_id} [{self.status}]"


class Medicine(TimestampedModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    manufacturer = models.CharField(max_length=255, blank=True, null=True)
    category = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    expiry_date = models.DateField(blank=True, null=True)
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ['name', 'id']

    def __str__(self) -> str:
        return self.name


class Prescription(TimestampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='prescriptions')
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='prescriptions')
    medicine = models.ForeignKey(Medicine, on_delete=models.PROTECT, related_name='prescriptions')
    dosage = models.CharField(max_length=128)
    frequency = models.CharField(max_length=128)
    duration_days = models.PositiveIntegerField()
    instructions = models.TextField(blank=True, null=True)
    prescribed_date = models.DateField(auto_now_add=True)

    class Meta:
        ordering = ['-prescribed_date', '-id']

    def __str__(self) -> str:
        return f"rx {self.id} p={self.patient_id} m={self.medicine_id}"


class Payment(TimestampedModel):
    STATUS_PENDING = 'pending'
    STATUS_COMPLETED = 'completed'
    STATUS_FAILED = 'failed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_FAILED, 'Failed'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='payments')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='payments'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=32, blank=True, null=True)
    payment_status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_date = models.DateTimeField(auto_now_add=True)
    description = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['-payment_date', '-id']

    def __str__(self) -> str:
        return f"pay {self.id} p={self.patient_id} {self.amount} [{self.payment_status}]"


class PatientHistory(TimestampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='history')
    visit_date = models.DateField()
    symptoms = models.TextField(blank=True, null=True)
    diagnosis = models.TextField(blank=True, null=True)
    treatment = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['-visit_date', '-id']
        verbose_name_plural = 'patient history'

    def __str__(self) -> str:
        return f"visit {self.id} p={self.patient_id} @ {self.visit_date}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
