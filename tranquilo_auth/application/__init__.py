"""
Application Layer - Use Cases and Orchestration

This layer contains:
- Interfaces: contracts for the directory store, mail dispatcher,
  credential hasher and session token issuer
- Services: the reset token manager
- Use cases: registration, login, password reset and user lookups

Depends on domain layer, orchestrates the credential lifecycle.
Defines interfaces that infrastructure layer must implement.
"""
