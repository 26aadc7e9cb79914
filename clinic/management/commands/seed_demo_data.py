"""
Management command to populate the database with demo data.
"""
import random
from datetime import date, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import (
    Appointment, Doctor, Medicine, Patient, PatientHistory, Payment, Prescription,
)

DOCTORS = [
    ("Grace Hopper", "Cardiology", "MD, FACC", 18, "150.00"),
    ("Alan Turing", "Neurology", "MD, PhD", 12, "180.00"),
    ("Marie Curie", "Oncology", "MD", 20, "220.00"),
    ("Joseph Lister", "General Surgery", "MBBS, FRCS", 15, "200.00"),
    ("Virginia Apgar", "Pediatrics", "MD", 9, "120.00"),
]

MEDICINES = [
    ("Amoxicillin 500mg", "Antibiotic", "Generic Labs", "0.85"),
    ("Metformin 850mg", "Diabetes", "Healthwise", "0.40"),
    ("Lisinopril 10mg", "Cardiovascular", "CardioPharm", "0.55"),
    ("Ibuprofen 400mg", "Analgesic", "PainAway", "0.20"),
    ("Atorvastatin 20mg", "Cardiovascular", "CardioPharm", "0.95"),
    ("Salbutamol Inhaler", "Respiratory", "BreatheEasy", "6.50"),
]

PATIENTS = [
    ("John Carter", "john.carter@example.com", "male", "O+", 45, "outpatient"),
    ("Maria Lopez", "maria.lopez@example.com", "female", "A+", 32, "inpatient"),
    ("Wei Chen", "wei.chen@example.com", "male", "B-", 58, "outpatient"),
    ("Aisha Khan", "aisha.khan@example.com", "female", "AB+", 27, "outpatient"),
    ("Tom Becker", "tom.becker@example.com", "male", "O-", 71, "inpatient"),
]

REASONS = ["Routine check-up", "Chest pain", "Persistent headache", "Follow-up visit", "Fever and cough"]


class Command(BaseCommand):
    help = 'Populate database with demo data'

    def add_arguments(self, parser):
        parser.add_argument('--seed', type=int, default=7, help='Random seed for repeatable data.')

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        self.stdout.write('Creating demo data...')

        doctors = self.create_doctors()
        medicines = self.create_medicines()
        patients = self.create_patients()
        appointments = self.create_appointments(rng, doctors, patients)
        self.create_prescriptions(rng, doctors, patients, medicines)
        self.create_payments(rng, appointments)
        self.create_history(rng, patients)

        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def create_doctors(self):
        doctors = []
        for name, specialty, qualification, years, fee in DOCTORS:
            email = name.lower().replace(' ', '.') + '@medicare.test'
            doctor, _ = Doctor.objects.get_or_create(email=email, defaults={
                'name': name, 'specialty': specialty, 'qualification': qualification,
                'experience_years': years, 'consultation_fee': Decimal(fee),
            })
            doctors.append(doctor)
        self.stdout.write(f'  doctors: {len(doctors)}')
        return doctors

    def create_medicines(self):
        medicines = []
        for name, category, manufacturer, price in MEDICINES:
            medicine, _ = Medicine.objects.get_or_create(name=name, defaults={
                'category': category, 'manufacturer': manufacturer, 'unit_price': Decimal(price),
                'stock_quantity': 500, 'expiry_date': date.today() + timedelta(days=540),
            })
            medicines.append(medicine)
        self.stdout.write(f'  medicines: {len(medicines)}')
        return medicines

    def create_patients(self):
        patients = []
        for name, email, gender, blood, age, ptype in PATIENTS:
            patient, _ = Patient.objects.get_or_create(email=email, defaults={
                'name': name, 'gender': gender, 'blood_group': blood, 'age': age,
                'patient_type': ptype, 'phone': '555-01%02d' % len(patients),
                'has_hypertension': age > 55,
            })
            patients.append(patient)
        self.stdout.write(f'  patients: {len(patients)}')
        return patients

    def create_appointments(self, rng, doctors, patients):
        now = timezone.now()
        appointments = []
        for patient in patients:
            for offset in (-14, 3):
                when = now + timedelta(days=offset, hours=rng.randint(8, 16) - now.hour)
                appointments.append(Appointment.objects.create(
                    patient=patient,
                    doctor=rng.choice(doctors),
                    appointment_date=when,
                    status=Appointment.STATUS_COMPLETED if offset < 0 else Appointment.STATUS_SCHEDULED,
                    reason=rng.choice(REASONS),
                    appointment_day=when.strftime('%A'),
                    appointment_time=when.strftime('%H:%M'),
                ))
        self.stdout.write(f'  appointments: {len(appointments)}')
        return appointments

    def create_prescriptions(self, rng, doctors, patients, medicines):
        count = 0
        for patient in patients:
            Prescription.objects.create(
                patient=patient,
                doctor=rng.choice(doctors),
                medicine=rng.choice(medicines),
                dosage='1 tablet',
                frequency=rng.choice(['once daily', 'twice daily', 'every 8 hours']),
                duration_days=rng.choice([5, 7, 14, 30]),
            )
            count += 1
        self.stdout.write(f'  prescriptions: {count}')

    def create_payments(self, rng, appointments):
        count = 0
        for appt in appointments:
            done = appt.status == Appointment.STATUS_COMPLETED
            Payment.objects.create(
                patient=appt.patient,
                appointment=appt,
                amount=appt.doctor.consultation_fee or Decimal('100.00'),
                payment_method=rng.choice(['cash', 'card', 'insurance']),
                payment_status=Payment.STATUS_COMPLETED if done else Payment.STATUS_PENDING,
                description=f'Consultation with Dr. {appt.doctor.name}',
            )
            count += 1
        self.stdout.write(f'  payments: {count}')

    def create_history(self, rng, patients):
        for patient in patients:
            PatientHistory.objects.create(
                patient=patient,
                visit_date=date.today() - timedelta(days=rng.randint(20, 400)),
                symptoms=rng.choice(REASONS),
                diagnosis='Observation',
                treatment='Rest and fluids',
            )
        self.stdout.write(f'  history: {len(patients)}')
