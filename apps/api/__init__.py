"""FastAPI application factory."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api.routes.projects import router as projects_router
from apps.api.routes.simulator import router as simulator_router


def create_app() -> FastAPI:
    app = FastAPI(title="Modular Feasibility API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "healthy"}

    app.include_router(projects_router)
    app.include_router(simulator_router)
    return app


__all__ = ["create_app"]
