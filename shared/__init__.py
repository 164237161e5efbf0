"""Shared utilities package for the Eventify application.

This package contains code used by both the backend maintenance commands and the
desktop event-editing widgets. It includes:

- Enums (enums.py) - user roles, organizer request states and map marker kinds
- Schemas (schemas.py) - Pydantic models for coordinates, photos, places and profiles
- Database models (models.py) - SQLAlchemy user table for SQL-backed user stores
- Validation utilities (validation.py) - input validation and sanitization
- Utility functions (utils.py) - image sniffing, data URLs and dotted-path helpers
"""
