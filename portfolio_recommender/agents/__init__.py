"""
LLM prompt packages for the Portfolio Recommender API.
"""
