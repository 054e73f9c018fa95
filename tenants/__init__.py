"""
Tenants module - software tenants that own authorization codes.

This module handles:
- Tenant entity and its enabled/disabled switch
- Tenant repository (port)
- Tenant infrastructure (Django ORM adapters)
"""
