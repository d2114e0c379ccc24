"""
Shared helpers for seeding and logging.
"""
