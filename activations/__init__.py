"""
Activations module - the authorization code state machine.

This module handles:
- ActivationEngine (activate, verify, deduct points)
- Client flows composing activation, binding and sessions
- Client action events feeding the audit log
"""
