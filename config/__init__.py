"""
Configuration package for the review store.
"""
