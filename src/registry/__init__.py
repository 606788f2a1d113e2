"""
Account Registry Module.

Host-side storage for review segments: the account ledger (segments,
balances, persistence) and the storage allocator.
"""
