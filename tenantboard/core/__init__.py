"""Core application components.

This module provides the foundational components for the Tenantboard API:
- Database connection management via Prisma
- Application settings and configuration
"""
