import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from myhome.core.config import settings
from myhome.core.database import engine, Base
from myhome.core.scheduler import start_scheduler, stop_scheduler
from myhome.api.routes import amenities, auth, communities, documents, houses, payments, users
# Every mapped class must be imported before the first query configures the mappers
from myhome.models import (  # noqa: F401
    amenity, booking, community, house, house_member, house_member_document, payment, security_token, user,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Create database tables from all models that inherit from Base
# In production, use migrations (Alembic) instead of create_all
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: Start background scheduler for security token cleanup
    Shutdown: Stop background scheduler
    """
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="MyHome API",
    description="Residential community management: users, communities, houses, amenities and payments",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware - allows frontend to make requests to backend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    # Login answers with the session in these headers, so browsers must be allowed to read them
    expose_headers=["userId", "token"],
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(communities.router)
app.include_router(houses.router)
app.include_router(amenities.router)
app.include_router(payments.router)
app.include_router(documents.router)


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {"message": "MyHome API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint - used by monitoring/deployment tools"""
    return {"status": "healthy"}
