"""Infrastructure Layer for the credential service.

Concrete implementations of the application layer interfaces:
- auth: bcrypt credential hasher, JWT session tokens, HTTP endpoints
- persistence: SQLAlchemy user directory
- mail: SMTP and logging mail dispatchers
- monitoring: structured logging with correlation ids
"""
