"""
Run the Portfolio Recommender API locally.

Loads .env.local (or .env) through portfolio_recommender.config and serves
the app with auto-reload on PORT (default 3000).
"""

import uvicorn

from portfolio_recommender.config import settings

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Portfolio Recommender API")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print(f"   - Health Check:  GET  http://localhost:{settings.PORT}/health")
    print(f"   - Recommend:     POST http://localhost:{settings.PORT}/v1/recommend")
    print(f"   - API Docs:           http://localhost:{settings.PORT}/docs")
    print()
    print("Authentication:")
    print("   /v1 endpoints require the header  x-api-key: <API_KEY>")
    print()
    print("Test with curl:")
    print(f'   curl -X POST "http://localhost:{settings.PORT}/v1/recommend" \\')
    print('     -H "x-api-key: $API_KEY" -H "Content-Type: application/json" \\')
    print('     -d \'{"objective": "grow savings for a house", "risk_tolerance": "high", "horizon_years": 10}\'')
    print()
    print("=" * 60)

    uvicorn.run(
        "portfolio_recommender.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=True,
        log_level=settings.LOG_LEVEL.lower()
    )
