"""
Portfolio Recommender API.

Validates an investment objective, asks Gemini for a portfolio, and returns
it only after it passes the Recommendation contract.
"""

__version__ = "1.0.0"
