"""
Authentication module for the appointment system.

This module provides authentication and authorization functionality including:
- Patient self-registration
- Password hashing and verification
- JWT token authentication
- Role-based access control
"""
