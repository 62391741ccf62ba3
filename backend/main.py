"""
Splitwiser Backend API

A FastAPI backend for group expense splitting and debt settlement.
This module sets up the app and mounts routers - all endpoint logic is in routers/.
"""

import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import models
from database import engine
from utils.engine import BalanceInvariantError

# Import routers
from routers import auth, profile, groups, members, expenses, balances, settlements


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create database tables
models.Base.metadata.create_all(bind=engine)

# Comma-separated list of frontend origins allowed to call the API
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

# Initialize FastAPI app
app = FastAPI(
    title="Splitwiser API",
    description="API for group expense splitting and debt settlement",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BalanceInvariantError)
async def balance_invariant_handler(request: Request, exc: BalanceInvariantError):
    # Corrupt expense data, not a client error
    logger.error(f"Balance invariant violated on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Balances are inconsistent"})


# Include routers
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(groups.router)
app.include_router(members.router)
app.include_router(expenses.router)
app.include_router(balances.router)
app.include_router(settlements.router)
