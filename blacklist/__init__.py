"""
Blacklist module - device and IP bans.

This module handles:
- Blacklist entries scoped to a tenant or global
- BlacklistGate lookups used by every client flow
- Administrative add/remove of entries
"""
