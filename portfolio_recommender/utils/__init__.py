"""
Shared helpers: logger factory and API-key generator.
"""
