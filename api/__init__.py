"""
FastAPI REST API over books, recipes and user accounts.

This module provides:
- CRUD over the books and recipes collections
- Exact field-set validation of every write
- Account registration and login with bcrypt password hashes
- Security-question based password reset and verification
"""
