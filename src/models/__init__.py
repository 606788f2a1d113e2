"""
Data models for the review store.

- Address: 32-byte identities and the authenticated caller
- Review: the persisted record
- Errors: failure kinds surfaced to callers
- Validation: field constraints
"""
