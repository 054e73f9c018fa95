"""
Licenses module - authorization code issuance and administration.

This module handles:
- AuthorizationCode entity with duration or points billing
- Batch generation with guaranteed uniqueness
- Administrative edits, deletion and time adjustment
- Point deduction audit records
"""
