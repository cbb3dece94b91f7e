"""
URL mappings for the clinic API.

Paths mirror the ones the browser front-end calls, so trailing slashes
are deliberately omitted.
"""
from django.urls import path, include

from .auth_views import login_view
from .views import health
from .views.certificates import download_certificate, generate_and_save_certificate, student_certificates
from .views.inventory import list_inventory
from .views.records import staff_day_log, staff_submit_record, student_records
from .views.students import hostel_details, student_name


urlpatterns = [
    # exposes /metrics
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('login', login_view, name='login_view'),
    # Students
    path('student/hostel-details', hostel_details, name='hostel_details'),
    path('student/certificates/<str:rollno>', student_certificates, name='student_certificates'),
    path('student/<str:rollno>', student_name, name='student_name'),
    # Inventory
    path('api/inventory', list_inventory, name='inventory'),
    # Visit records
    path('medical/staff/record', staff_submit_record, name='staff_submit_record'),
    path('medical/staff/records', staff_day_log, name='staff_day_log'),
    path('records/<str:rollno>', student_records, name='student_records'),
    # Certificates
    path('generate-and-save-certificate', generate_and_save_certificate, name='generate_and_save_certificate'),
    path('download/certificate/<str:filename>', download_certificate, name='download_certificate'),
]
