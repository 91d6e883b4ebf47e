"""
Account subsystem.

Components:
- user_store.py: SQLite-backed users table (User record)
- credentials.py: password hashing behind the PasswordHasher port
- auth.py: signup/login flows with input validation
"""
