"""
API-key authentication for the /v1 endpoints.
"""
