"""
Devices module - device identity and binding.

This module handles:
- Fingerprint generation and validation
- Device entity and its binding to an authorization code
- DeviceBindingManager (bind, unbind, quota, rebind)
"""
