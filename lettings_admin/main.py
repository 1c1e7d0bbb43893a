# lettings_admin/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lettings_admin.config import ALLOWED_ORIGINS
from lettings_admin.logging_config import setup_logging
from lettings_admin.middleware import RequestIDMiddleware
from lettings_admin.routes.assignments import router as assignments_router
from lettings_admin.routes.bookings import router as bookings_router
from lettings_admin.routes.health import router as health_router
from lettings_admin.routes.metrics import router as metrics_router
from lettings_admin.routes.properties import router as properties_router
from lettings_admin.routes.users import router as users_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Lettings Admin API",
    description="Booking directory, property assignment and user management for marketplace staff",
    version="1.0.0",
)

app.add_middleware(RequestIDMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(bookings_router, prefix="/admin", tags=["Bookings"])
app.include_router(properties_router, prefix="/admin", tags=["Properties"])
app.include_router(assignments_router, prefix="/admin", tags=["Assignments"])
app.include_router(users_router, prefix="/admin", tags=["Users"])

logger.info("app_initialized", routes=len(app.routes))
