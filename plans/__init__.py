"""
Plans module - the plan catalog.

This module handles:
- Plan entity and its structured duration
- Calendar-aware duration arithmetic
- Plan lookup by id or alias
"""
