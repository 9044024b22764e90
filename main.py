from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from models.event_models import HealthResponse
from routes.realtime_ws import router as realtime_router
from routes.session_route import router as session_router
from services.realtime.runtime import PairingRuntime
from utils.app_settings import AppSettings
from utils.logging_config import configure_logging

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

load_dotenv()  # Load environment variables from .env file if present


def create_app(
    settings: Optional[AppSettings] = None,
    runtime: Optional[PairingRuntime] = None,
    configure_logs: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        settings: Optional settings (read from the environment if omitted).
        runtime: Optional pre-built runtime, e.g. with a fake scheduler in tests.
        configure_logs: Install the console log handler on startup.
    """
    settings = settings or (runtime.settings if runtime is not None else AppSettings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Attach the chat runtime (session registry, countdowns, connections)
        to `app.state`; pending countdowns are cancelled on shutdown.
        """
        if configure_logs:
            configure_logging(settings)
        app.state.runtime = runtime if runtime is not None else PairingRuntime(settings)
        try:
            yield
        finally:
            await app.state.runtime.shutdown()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request):
        """
        Report how many sessions, live connections and pending countdowns the server holds.
        """
        runtime_ = getattr(request.app.state, "runtime", None)
        if runtime_ is None:
            return HealthResponse(ok=False)
        return HealthResponse(
            ok=True,
            sessions=len(runtime_.store),
            connections=len(runtime_.hub),
            countdowns=len(runtime_.scheduler),
        )

    # Register application routers
    app.include_router(session_router)
    app.include_router(realtime_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = app.state.settings
    uvicorn.run(app, host=_settings.host, port=_settings.port, log_config=None)
