"""
FastAPI routers for all API endpoints.

- health: public liveness check
- recommendations: POST /v1/recommend (API key required)
"""
