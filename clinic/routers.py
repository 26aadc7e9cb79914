"""
URL mappings for the MediCare API.

Trailing slashes are deliberately omitted; ``APPEND_SLASH`` is off.
"""
from django.urls import path

from .auth_views import jwt_refresh_view, login_view, logout_view, session_view, signup_view
from .views.appointments import appointment_detail, appointment_options, appointment_status, appointments
from .views.dashboard import dashboard_stats
from .views.doctors import doctor_detail, doctors
from .views.health import healthz
from .views.history import patient_history, patient_history_detail
from .views.medicines import medicine_detail, medicines
from .views.patients import patient_detail, patients
from .views.payments import payment_detail, payment_status, payments
from .views.prescriptions import prescription_detail, prescriptions
from .views.staff import staff_list, staff_status

urlpatterns = [
    # Auth
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/session', session_view, name='session_view'),
    path('api/auth/signup', signup_view, name='signup_view'),

    # Staff accounts
    path('api/staff', staff_list, name='staff_list'),
    path('api/staff/<int:pk>/status', staff_status, name='staff_status'),

    # Records
    path('api/patients', patients, name='patients'),
    path('api/patients/<int:pk>', patient_detail, name='patient_detail'),
    path('api/doctors', doctors, name='doctors'),
    path('api/doctors/<int:pk>', doctor_detail, name='doctor_detail'),
    path('api/appointments', appointments, name='appointments'),
    path('api/appointments/options', appointment_options, name='appointment_options'),
    path('api/appointments/<int:pk>', appointment_detail, name='appointment_detail'),
    path('api/appointments/<int:pk>/status', appointment_status, name='appointment_status'),
    path('api/medicines', medicines, name='medicines'),
    path('api/medicines/<int:pk>', medicine_detail, name='medicine_detail'),
    path('api/prescriptions', prescriptions, name='prescriptions'),
    path('api/prescriptions/<int:pk>', prescription_detail, name='prescription_detail'),
    path('api/payments', payments, name='payments'),
    path('api/payments/<int:pk>', payment_detail, name='payment_detail'),
    path('api/payments/<int:pk>/status', payment_status, name='payment_status'),
    path('api/patient-history', patient_history, name='patient_history'),
    path('api/patient-history/<int:pk>', patient_history_detail, name='patient_history_detail'),

    # Dashboard
    path('api/dashboard/stats', dashboard_stats, name='dashboard_stats'),

    # Ops
    path('healthz', healthz, name='healthz'),
]
