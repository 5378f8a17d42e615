"""
auth — User authentication module.

Provides:
  • Signed, expiring bearer tokens (HMAC-SHA256)
  • Password hashing (bcrypt, salted, configurable cost)
  • Signup / Login API routes and the credential flow behind them
"""
