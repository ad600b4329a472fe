"""
vsgraph FastAPI server — compiles node graphs sent by the editor UI.

Start with:
    python -m vsgraph.server.main

Or via uvicorn directly:
    uvicorn vsgraph.server.main:app --port 3001 --reload
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vsgraph.server.routes.graph_routes import router
from vsgraph.server.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s [%(name)s] %(message)s")

# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(title="vsgraph API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vsgraph.server.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
    )
