"""
Presence module - online sessions and heartbeats.

This module handles:
- OnlineSession entity and its liveness rule
- SessionManager (tokens, heartbeats, sweeps, single sign-on)
"""
