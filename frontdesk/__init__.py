"""Front-desk application for the clinic backend.

This package contains the models, services, views and route registrations
for patient registration, visit tracking, lab-test results and nurse
management.
"""
