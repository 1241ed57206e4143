"""Services module.

Services:
- passwords.py: bcrypt password hashing
- tokens.py: bearer token issuance and decoding
- auth.py: login flow
"""
