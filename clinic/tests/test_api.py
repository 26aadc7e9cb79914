"""
Integration tests for the MediCare API.

These tests exercise role scoped listing, patient ownership, booking,
the appointment status machine, the not-linked fallback and the
receptionist screens through DRF's APIClient within APITestCase.

To run the tests:

```
pytest -q clinic/tests
```
"""
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from clinic.models import (
    Appointment, AuditEvent, Doctor, Medicine, Patient, PatientHistory, Payment, Prescription, User,
)

PW = 'Str0ng!Pass9'


class MediCareAPITests(APITestCase):
    def setUp(self) -> None:
        """Accounts for every role, two patient records and clinical rows for both."""
        self.admin = User.objects.create_user(email='admin@x.com', password=PW, role='admin')
        self.doctor_user = User.objects.create_user(email='doc@x.com', password=PW, role='doctor')
        self.reception = User.objects.create_user(email='desk@x.com', password=PW, role='receptionist')
        self.patient_user = User.objects.create_user(email='a@x.com', password=PW, role='patient')
        self.orphan_user = User.objects.create_user(email='nobody@x.com', password=PW, role='patient')

        self.alice = Patient.objects.create(id=7, name='Alice', email='a@x.com')
        self.bob = Patient.objects.create(id=8, name='Bob', email='b@x.com', patient_type='inpatient')
        self.doctor = Doctor.objects.create(name='House', specialty='Diagnostics', email='house@x.com',
                                            consultation_fee=Decimal('100.00'))
        when = timezone.now() + timedelta(days=2)
        self.appt_alice = Appointment.objects.create(id=1, patient=self.alice, doctor=self.doctor,
                                                     appointment_date=when)
        self.appt_bob = Appointment.objects.create(id=2, patient=self.bob, doctor=self.doctor,
                                                   appointment_date=when)
        self.medicine = Medicine.objects.create(name='Aspirin', category='Analgesic', unit_price=Decimal('1.50'))
        self.rx_alice = Prescription.objects.create(patient=self.alice, doctor=self.doctor, medicine=self.medicine,
                                                    dosage='1 tab', frequency='daily', duration_days=10)
        self.rx_bob = Prescription.objects.create(patient=self.bob, doctor=self.doctor, medicine=self.medicine,
                                                  dosage='2 tab', frequency='daily', duration_days=5)
        self.pay_alice = Payment.objects.create(patient=self.alice, appointment=self.appt_alice,
                                                amount=Decimal('100.00'), payment_status='completed')
        self.pay_bob = Payment.objects.create(patient=self.bob, amount=Decimal('80.00'))
        PatientHistory.objects.create(patient=self.alice, visit_date=timezone.localdate(), diagnosis='Flu')
        PatientHistory.objects.create(patient=self.bob, visit_date=timezone.localdate(), diagnosis='Cold')

        self.client = APIClient()

    def authenticate(self, user: User) -> None:
        """Helper to authenticate the test client as the given user."""
        self.client.force_authenticate(user=user)

    def booking(self, **extra):
        body = {
            'doctor_id': self.doctor.id,
            'patient_id': self.bob.id,
            'appointment_date': (timezone.now() + timedelta(days=5)).isoformat(),
            'reason': 'Check-up',
        }
        body.update(extra)
        return body

    # --- patient scoping -------------------------------------------------

    def test_patient_sees_only_own_appointments(self):
        self.authenticate(self.patient_user)
        resp = self.client.get('/api/appointments')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['scope'], 'own')
        self.assertEqual([a['id'] for a in resp.data['data']], [1])
        self.assertEqual(resp.data['data'][0]['doctor_name'], 'House')
        self.assertEqual(resp.data['data'][0]['doctor_specialty'], 'Diagnostics')
        self.assertNotIn('state', resp.data)

    def test_patient_lists_are_scoped_for_every_clinical_resource(self):
        self.authenticate(self.patient_user)
        for url, expected in [
            ('/api/prescriptions', [self.rx_alice.id]),
            ('/api/payments', [self.pay_alice.id]),
            ('/api/patients', [self.alice.id]),
        ]:
            resp = self.client.get(url)
            self.assertEqual(resp.status_code, status.HTTP_200_OK, url)
            self.assertEqual([r['id'] for r in resp.data['data']], expected, url)
        history = self.client.get('/api/patient-history')
        self.assertEqual([h['patient_id'] for h in history.data['data']], [self.alice.id])

    def test_patient_filter_cannot_widen_scope(self):
        self.authenticate(self.patient_user)
        resp = self.client.get('/api/payments', {'patient_id': self.bob.id})
        self.assertEqual(resp.data['data'], [])

    def test_patient_cannot_open_another_patients_rows(self):
        self.authenticate(self.patient_user)
        self.assertEqual(self.client.get('/api/appointments/2').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(f'/api/payments/{self.pay_bob.id}').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get('/api/appointments/1').status_code, status.HTTP_200_OK)

    def test_patient_is_denied_doctor_and_medicine_screens(self):
        self.authenticate(self.patient_user)
        for url in ('/api/doctors', '/api/medicines', '/api/staff'):
            resp = self.client.get(url)
            self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN, url)
        denied = self.client.get('/api/doctors')
        self.assertEqual(denied.data['error']['code'], 'access_denied')
        self.assertTrue(AuditEvent.objects.filter(action='access_denied', object_type='doctors').exists())

    # --- booking ---------------------------------------------------------

    def test_patient_booking_is_forced_to_own_record(self):
        self.authenticate(self.patient_user)
        resp = self.client.post('/api/appointments', self.booking(patient_id=self.bob.id), format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['data']['patient_id'], 7)
        self.assertEqual(Appointment.objects.get(pk=resp.data['data']['id']).patient_id, 7)

    def test_patient_booking_options_list_doctors(self):
        self.authenticate(self.patient_user)
        resp = self.client.get('/api/appointments/options')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([d['id'] for d in resp.data['data']['doctors']], [self.doctor.id])
        self.assertEqual(resp.data['data']['patients'], [{'id': 7, 'name': 'Alice'}])
        self.assertEqual(resp.data['data']['patient_id'], 7)

    def test_staff_booking_keeps_requested_patient(self):
        self.authenticate(self.reception)
        resp = self.client.post('/api/appointments', self.booking(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['data']['patient_id'], self.bob.id)
        self.assertEqual(resp.data['data']['status'], 'scheduled')

    def test_booking_with_non_object_body_is_rejected(self):
        before = Appointment.objects.count()
        for user in (self.patient_user, self.reception):
            self.authenticate(user)
            resp = self.client.post('/api/appointments', [{'doctor_id': self.doctor.id}], format='json')
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIs(resp.data['ok'], False)
        self.assertEqual(Appointment.objects.count(), before)

    def test_duplicate_submit_creates_one_row(self):
        self.authenticate(self.reception)
        body = self.booking()
        before = Appointment.objects.count()
        first = self.client.post('/api/appointments', body, format='json')
        second = self.client.post('/api/appointments', body, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data['error']['code'], 'duplicate_submission')
        self.assertEqual(Appointment.objects.count(), before + 1)

    def test_failed_submit_can_be_retried(self):
        self.authenticate(self.reception)
        body = self.booking(doctor_id=9999)
        self.assertEqual(self.client.post('/api/appointments', body, format='json').status_code, 400)
        self.assertEqual(self.client.post('/api/appointments', body, format='json').status_code, 400)

    # --- status machine --------------------------------------------------

    def test_patient_cancels_own_scheduled_appointment_once(self):
        self.authenticate(self.patient_user)
        resp = self.client.put('/api/appointments/1/status', {'status': 'cancelled'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['status'], 'cancelled')
        again = self.client.put('/api/appointments/1/status', {'status': 'completed'}, format='json')
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(again.data['error']['code'], 'validation_error')

    def test_patient_cannot_change_other_patients_status(self):
        self.authenticate(self.patient_user)
        resp = self.client.put('/api/appointments/2/status', {'status': 'cancelled'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.appt_bob.refresh_from_db()
        self.assertEqual(self.appt_bob.status, 'scheduled')

    def test_doctor_completes_appointment_but_not_back_to_scheduled(self):
        self.authenticate(self.doctor_user)
        ok = self.client.put('/api/appointments/2/status', {'status': 'completed'}, format='json')
        self.assertEqual(ok.status_code, status.HTTP_200_OK)
        back = self.client.put('/api/appointments/2/status', {'status': 'scheduled'}, format='json')
        self.assertEqual(back.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receptionist_cannot_change_status(self):
        self.authenticate(self.reception)
        resp = self.client.put('/api/appointments/1/status', {'status': 'completed'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_patient_cannot_edit_or_delete_appointments(self):
        self.authenticate(self.patient_user)
        self.assertEqual(self.client.put('/api/appointments/1', {'notes': 'x'}, format='json').status_code, 403)
        self.assertEqual(self.client.delete('/api/appointments/1').status_code, 403)
        self.assertTrue(Appointment.objects.filter(pk=1).exists())

    # --- not linked fallback ---------------------------------------------

    def test_unlinked_patient_gets_profile_not_found_state(self):
        self.authenticate(self.orphan_user)
        for url in ('/api/appointments', '/api/prescriptions', '/api/payments', '/api/patients'):
            resp = self.client.get(url)
            self.assertEqual(resp.status_code, status.HTTP_200_OK, url)
            self.assertEqual(resp.data['state'], 'profile_not_found', url)
            self.assertEqual(resp.data['data'], [], url)
            self.assertIn('Patient Profile Not Found', resp.data['message'])

    def test_unlinked_patient_mutations_write_nothing(self):
        self.authenticate(self.orphan_user)
        before = Appointment.objects.count()
        resp = self.client.post('/api/appointments', self.booking(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error']['code'], 'profile_not_found')
        status_resp = self.client.put('/api/appointments/1/status', {'status': 'cancelled'}, format='json')
        self.assertEqual(status_resp.data['error']['code'], 'profile_not_found')
        edit = self.client.put('/api/patients/7', {'name': 'Hijack'}, format='json')
        self.assertEqual(edit.data['error']['code'], 'profile_not_found')
        self.assertEqual(Appointment.objects.count(), before)
        self.appt_alice.refresh_from_db()
        self.assertEqual(self.appt_alice.status, 'scheduled')
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.name, 'Alice')

    def test_new_record_links_account_without_relogin(self):
        self.authenticate(self.orphan_user)
        self.assertEqual(self.client.get('/api/appointments').data['state'], 'profile_not_found')
        self.authenticate(self.admin)
        created = self.client.post('/api/patients', {'name': 'Nobody Known', 'email': 'NOBODY@x.com'}, format='json')
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.authenticate(self.orphan_user)
        resp = self.client.get('/api/patients')
        self.assertNotIn('state', resp.data)
        self.assertEqual([p['email'] for p in resp.data['data']], ['nobody@x.com'])

    # --- patient self edit -----------------------------------------------

    def test_patient_edits_own_record_but_not_email_or_type(self):
        self.authenticate(self.patient_user)
        resp = self.client.put('/api/patients/7', {
            'name': 'Alice Smith', 'email': 'evil@x.com', 'patient_type': 'inpatient', 'blood_group': 'O+',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.name, 'Alice Smith')
        self.assertEqual(self.alice.blood_group, 'O+')
        self.assertEqual(self.alice.email, 'a@x.com')
        self.assertEqual(self.alice.patient_type, 'outpatient')

    def test_patient_cannot_edit_other_record(self):
        self.authenticate(self.patient_user)
        resp = self.client.put('/api/patients/8', {'name': 'Bobby'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data['error']['message'], 'You can only edit your own records.')
        self.bob.refresh_from_db()
        self.assertEqual(self.bob.name, 'Bob')

    def test_staff_email_change_relinks_accounts(self):
        self.authenticate(self.patient_user)
        self.assertEqual(self.client.get('/api/patients').data['data'][0]['id'], 7)
        self.authenticate(self.doctor_user)
        resp = self.client.put('/api/patients/7', {'email': 'alice.new@x.com'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.authenticate(self.patient_user)
        self.assertEqual(self.client.get('/api/patients').data['state'], 'profile_not_found')

    # --- receptionist ----------------------------------------------------

    def test_receptionist_doctor_screen(self):
        self.authenticate(self.reception)
        listing = self.client.get('/api/doctors')
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual(listing.data['scope'], 'all')
        self.assertEqual(listing.data['permissions'],
                         {'read': True, 'create': True, 'update': True, 'delete': False})
        created = self.client.post('/api/doctors', {
            'name': 'Quinn', 'specialty': 'Family Medicine', 'email': 'quinn@x.com',
        }, format='json')
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        updated = self.client.put(f"/api/doctors/{created.data['data']['id']}", {'phone': '555'}, format='json')
        self.assertEqual(updated.status_code, status.HTTP_200_OK)
        deleted = self.client.delete(f'/api/doctors/{self.doctor.id}')
        self.assertEqual(deleted.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Doctor.objects.filter(pk=self.doctor.id).exists())

    def test_receptionist_is_denied_clinical_and_billing_screens(self):
        self.authenticate(self.reception)
        for url in ('/api/prescriptions', '/api/payments', '/api/medicines', '/api/patient-history'):
            resp = self.client.get(url)
            self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN, url)
            self.assertEqual(resp.data['error']['code'], 'access_denied', url)

    def test_receptionist_reads_patients_but_cannot_change_them(self):
        self.authenticate(self.reception)
        self.assertEqual(len(self.client.get('/api/patients').data['data']), 2)
        self.assertEqual(self.client.put('/api/patients/8', {'name': 'X'}, format='json').status_code, 403)
        self.assertEqual(self.client.post('/api/patients', {'name': 'Y Y', 'email': 'y@x.com'},
                                          format='json').status_code, 403)

    # --- dashboard -------------------------------------------------------

    def test_admin_dashboard_has_all_figures(self):
        self.authenticate(self.admin)
        data = self.client.get('/api/dashboard/stats').data['data']
        self.assertEqual(data['total_doctors'], 1)
        self.assertEqual(data['total_patients'], 2)
        self.assertEqual(data['scheduled_appointments'], 2)
        self.assertEqual(data['total_medicines'], 1)
        self.assertEqual(Decimal(str(data['total_revenue'])), Decimal('100.00'))
        self.assertEqual(data['outpatients'], 1)
        self.assertEqual(data['inpatients'], 1)

    def test_receptionist_dashboard_omits_unreadable_figures(self):
        self.authenticate(self.reception)
        data = self.client.get('/api/dashboard/stats').data['data']
        self.assertIn('total_doctors', data)
        self.assertIn('scheduled_appointments', data)
        self.assertNotIn('total_revenue', data)
        self.assertNotIn('total_medicines', data)

    def test_patient_dashboard_counts_own_rows(self):
        self.authenticate(self.patient_user)
        resp = self.client.get('/api/dashboard/stats')
        data = resp.data['data']
        self.assertEqual(resp.data['scope'], 'own')
        self.assertEqual(data['total_appointments'], 1)
        self.assertEqual(data['upcoming_appointments'], 1)
        self.assertEqual(data['active_prescriptions'], 1)
        self.assertEqual(data['pending_payments'], 0)
        self.assertEqual(Decimal(str(data['total_paid'])), Decimal('100.00'))
        self.assertNotIn('total_patients', data)

    def test_unlinked_patient_dashboard_is_empty(self):
        self.authenticate(self.orphan_user)
        resp = self.client.get('/api/dashboard/stats')
        self.assertEqual(resp.data['state'], 'profile_not_found')
        self.assertEqual(resp.data['data'], {})

    # --- staff CRUD ------------------------------------------------------

    def test_doctor_reads_payments_and_changes_status(self):
        self.authenticate(self.doctor_user)
        self.assertEqual(len(self.client.get('/api/payments').data['data']), 2)
        resp = self.client.put(f'/api/payments/{self.pay_bob.id}/status',
                               {'payment_status': 'completed'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.pay_bob.refresh_from_db()
        self.assertEqual(self.pay_bob.payment_status, 'completed')

    def test_patient_cannot_change_payment_status(self):
        self.authenticate(self.patient_user)
        resp = self.client.put(f'/api/payments/{self.pay_alice.id}/status',
                               {'payment_status': 'failed'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_doctor_writes_prescription_with_joined_names(self):
        self.authenticate(self.doctor_user)
        resp = self.client.post('/api/prescriptions', {
            'patient_id': self.bob.id, 'doctor_id': self.doctor.id, 'medicine_id': self.medicine.id,
            'dosage': '1 tab', 'frequency': 'twice daily', 'duration_days': 7,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['data']['medicine_name'], 'Aspirin')
        self.assertEqual(resp.data['data']['patient_name'], 'Bob')
        self.assertEqual(resp.data['data']['doctor_name'], 'House')

    def test_medicine_in_use_cannot_be_deleted(self):
        self.authenticate(self.admin)
        resp = self.client.delete(f'/api/medicines/{self.medicine.id}')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Medicine.objects.filter(pk=self.medicine.id).exists())

    def test_payment_rejects_appointment_of_other_patient(self):
        self.authenticate(self.admin)
        resp = self.client.post('/api/payments', {
            'patient_id': self.bob.id, 'appointment_id': self.appt_alice.id, 'amount': '10.00',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_search_and_pagination(self):
        self.authenticate(self.admin)
        resp = self.client.get('/api/patients', {'q': 'ali'})
        self.assertEqual([p['name'] for p in resp.data['data']], ['Alice'])
        page = self.client.get('/api/patients', {'page': 2, 'pageSize': 1})
        self.assertEqual(page.data['pagination'], {'total': 2, 'page': 2, 'pageSize': 1})
        self.assertEqual([p['name'] for p in page.data['data']], ['Bob'])
        typed = self.client.get('/api/patients', {'patient_type': 'inpatient'})
        self.assertEqual([p['id'] for p in typed.data['data']], [8])

    def test_mutations_are_audited(self):
        self.authenticate(self.admin)
        self.client.delete(f'/api/patient-history/{PatientHistory.objects.first().id}')
        self.assertTrue(AuditEvent.objects.filter(action='patient_history_delete', user=self.admin).exists())
