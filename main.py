import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from checkday.config import get_settings
from checkday.infrastructure.database import engine, initialize_database
from checkday.infrastructure.notifications import ConnectionRegistry, NotificationDispatcher
from checkday.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables and bind the dispatcher to the serving loop."""

    initialize_database()
    dispatcher = app.state.notification_dispatcher
    dispatcher.bind_loop(asyncio.get_running_loop())
    yield
    dispatcher.bind_loop(None)
    engine.dispose()


def create_app(registry: ConnectionRegistry | None = None) -> FastAPI:
    """Build the FastAPI application with its own connection registry."""

    app = FastAPI(title="Checkday notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if registry is None:
        registry = ConnectionRegistry()
    app.state.connection_registry = registry
    app.state.notification_dispatcher = NotificationDispatcher(registry)

    register_routes(app)
    return app


app = create_app()
