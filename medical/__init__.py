"""Medical application for the student clinic backend.

This package contains models, serializers, services, views and route
registrations for visit records, the medicine inventory and medical
certificates.
"""
