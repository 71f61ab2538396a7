"""
auth — User authentication module.

Provides:
  • Password hashing (bcrypt, salted, cost factor 12)
  • Signed token issuance with a 1-hour expiry
  • Sign-up / sign-in handlers returning tagged outcomes
  • ``/api/auth/signup`` and ``/api/auth/signin`` routes
"""
