"""
Address derivation for review segments.
"""
