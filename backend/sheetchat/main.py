# sheetchat/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from sheetchat.api import messages, session
from sheetchat.config import Settings
from sheetchat.core.rate_limit import limiter
from sheetchat.services.store_factory import build_store_factory
from sheetchat.utils.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if app.state.chat is not None:
        app.state.chat.disconnect()
        app.state.chat = None


def create_app(settings: Settings | None = None, store_factory=None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="SheetChat",
        version="1.0.0",
        description="End-to-end encrypted chat on top of a spreadsheet",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.store_factory = store_factory or build_store_factory(settings)
    app.state.chat = None
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Register routers
    app.include_router(session.router, tags=["Session"])
    app.include_router(messages.router, tags=["Messages"])

    @app.get("/health")
    def health_check():
        chat = app.state.chat
        return {"status": "ok", "connected": bool(chat and chat.connected)}

    return app


setup_logger()
app = create_app()
