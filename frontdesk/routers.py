"""
URL mappings for the clinic front-desk API.

Paths mirror the routes the mobile front-end calls.  Trailing slashes
are deliberately omitted.  Literal segments (``aadhar/``, ``active``,
``status/``) are registered before the catch-all id routes.
"""
from django.urls import path

from .auth_views import auth_health, login_view
from .views import health
from .views.labtests import (
    labtests,
    labtest_detail,
    labtest_result,
    labtests_by_status,
    patient_labtests,
    visit_labtest_create,
    visit_labtests,
)
from .views.nurses import (
    active_nurses,
    nurse_by_nurse_id,
    nurse_detail,
    nurse_status,
    nurses,
)
from .views.patients import check_aadhar, patient_by_aadhar, patient_detail, patients
from .views.visits import patient_recent_visits, patient_visits, visit_detail, visits


urlpatterns = [
    path('healthz', health.healthz),
    path('api/test/health', health.service_health),
    path('api/test/db-connection', health.db_connection),

    # Authentication
    path('api/auth/health', auth_health),
    path('api/auth/login', login_view, name='login_view'),

    # Patients
    path('api/patients', patients, name='patients'),
    path('api/patients/aadhar/<str:aadhar_number>', patient_by_aadhar),
    path('api/patients/check-aadhar/<str:aadhar_number>', check_aadhar),
    path('api/patients/<str:patient_id>', patient_detail, name='patient_detail'),

    # Visits
    path('api/visits', visits),
    path('api/visits/patient/<str:patient_id>', patient_visits, name='patient_visits'),
    path('api/visits/patient/<str:patient_id>/recent', patient_recent_visits),
    path('api/visits/<int:visit_id>', visit_detail),

    # Lab tests
    path('api/labtests', labtests),
    path('api/labtests/patient/<str:patient_id>', patient_labtests),
    path('api/labtests/patient/<str:patient_id>/visit/<int:visit_id>', visit_labtest_create),
    path('api/labtests/visit/<int:visit_id>', visit_labtests),
    path('api/labtests/status/<str:status_name>', labtests_by_status),
    path('api/labtests/<int:test_id>', labtest_detail),
    path('api/labtests/<int:test_id>/result', labtest_result),

    # Nurses
    path('api/nurses', nurses),
    path('api/nurses/active', active_nurses),
    path('api/nurses/find-by-nurse-id/<str:nurse_id>', nurse_by_nurse_id),
    path('api/nurses/status/<str:nurse_id>', nurse_status),
    path('api/nurses/<str:nurse_id>', nurse_detail),
]
