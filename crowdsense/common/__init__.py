"""
Common utilities shared across all modules.
"""
