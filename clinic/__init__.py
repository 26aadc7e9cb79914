"""Clinic application for the MediCare backend.

This package contains the models, the role access rules, serializers,
views and route registrations behind the hospital REST API.
"""
