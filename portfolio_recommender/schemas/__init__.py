"""
Pydantic schemas for API request and response validation.

Every schema here forbids or drops unknown keys explicitly; nothing is passed
through unvalidated.
"""
