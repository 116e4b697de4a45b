"""
Credential and session management core for TranquiloPay accounts.

Registers users with bcrypt-hashed credentials, authenticates them into
signed bearer tokens, and runs the single-use, time-boxed password reset
flow with out-of-band token delivery.
"""

__version__ = "1.0.0"
