"""
Licenses module - License key lifecycle.

This module handles:
- LicenseKey entity and domain logic
- Key generation with collision retry
- Activation with expiry chaining
- License validation
"""
