"""Tenantboard: multi-tenant dashboard widgets with role-based access control."""
