from fastapi import APIRouter

from app.api.routes import health, tickets, codes, stats

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])  # POST /, GET /{id}, POST /validate, /redeem
api_router.include_router(codes.router, prefix="/codes", tags=["codes"])  # POST /redeem, /validate
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])  # GET /, GET /codes
api_router.include_router(codes.legacy_router, prefix="/api", tags=["legacy"])  # /api/qrs/*, /api/qr-stats
