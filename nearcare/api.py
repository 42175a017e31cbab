# nearcare/api.py
"""
Same-origin facility directory.

Serves the bundled list at ``GET /api/health-centers``; run with
``uvicorn nearcare.api:app``.
"""
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nearcare.core.models import Facility
from nearcare.discovery.seed import seed_facilities

app = FastAPI(title="nearcare facility directory", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:8000", "http://localhost:8000"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.get("/api/health-centers", response_model=List[Facility], response_model_exclude_none=True)
async def health_centers():
    return seed_facilities()
