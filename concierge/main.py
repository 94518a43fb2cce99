"""FastAPI main application."""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .db import DatabaseConnection
from .services import (
    ConciergeStore,
    ConversationContextStore,
    IntentClassifier,
    ResponseGenerator,
    Orchestrator,
    ConnectionHub,
    create_text_generator
)
from .utils.logger import init_app_logger
from .api.v1 import conversations, websocket


# Initialize logger
logger = init_app_logger(settings)

# Global instances (set during startup)
db_conn: DatabaseConnection = None
connection_hub: ConnectionHub = None
text_generator = None


def build_hub(store: ConciergeStore, generator=None) -> ConnectionHub:
    """
    Wire the orchestration pipeline around a store.

    Args:
        store: Conversation store
        generator: Optional TextGenerator; None means canned replies only

    Returns:
        ConnectionHub driving the orchestrator
    """
    orchestrator = Orchestrator(
        store=store,
        classifier=IntentClassifier(generator),
        response_generator=ResponseGenerator(generator),
        context_store=ConversationContextStore(
            store,
            recent_messages=settings.context_recent_messages,
            recent_interactions=settings.context_recent_interactions
        )
    )
    return ConnectionHub(orchestrator, max_message_length=settings.chat_max_message_length)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    global db_conn, connection_hub, text_generator

    # Startup
    logger.info("=" * 70)
    logger.info("Starting Contoso Hotels AI Concierge...")
    logger.info("=" * 70)

    logger.info("")
    logger.info("📡 Server Configuration:")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Log File: {settings.log_file}")

    logger.info("")
    logger.info("💬 Chat Configuration:")
    logger.info(f"  Database: {settings.database_path}")
    logger.info(f"  Max Message Length: {settings.chat_max_message_length}")
    logger.info(f"  Context Window: {settings.context_recent_messages} messages, "
                f"{settings.context_recent_interactions} interactions")

    logger.info("")
    logger.info("🤖 Text Generation:")
    if settings.generation_configured():
        key = settings.generation_api_key
        masked_key = key[:8] + "..." + key[-4:] if len(key) > 12 else "***"
        logger.info(f"  API Base: {settings.generation_api_base}")
        logger.info(f"  Model: {settings.generation_model}")
        logger.info(f"  API Key: {masked_key}")
    else:
        logger.info("  Not configured - agents answer with canned replies")

    db_conn = DatabaseConnection(settings.database_path)
    store = ConciergeStore(db_conn)
    text_generator = create_text_generator(settings)
    connection_hub = build_hub(store, text_generator)

    # Set dependencies in API modules
    conversations.store = store
    websocket.hub = connection_hub

    logger.info("")
    logger.info("=" * 70)
    logger.info("✅ AI Concierge started successfully!")
    logger.info(f"📍 Access at: http://{settings.host}:{settings.port}")
    logger.info(f"📚 API Docs: http://{settings.host}:{settings.port}/docs")
    logger.info("=" * 70)

    yield

    # Shutdown
    logger.info("")
    logger.info("=" * 70)
    logger.info("Shutting down AI Concierge...")
    logger.info("=" * 70)

    if connection_hub:
        await connection_hub.shutdown()
    if text_generator:
        await text_generator.close()
    if db_conn:
        db_conn.close()

    logger.info("✅ AI Concierge shut down successfully")


# Create FastAPI application
app = FastAPI(
    title="Contoso Hotels AI Concierge",
    description="Real-time hotel concierge chat with intent-routed virtual agents",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(conversations.router)
app.include_router(websocket.router)


@app.get("/")
async def read_root():
    """
    Service index.

    Returns:
        Service name and useful links
    """
    return {
        "message": "Contoso Hotels AI Concierge API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "websocket": "/ws/chat"
    }


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "AI Concierge"
    }


@app.get("/api/v1/chat/health")
async def chat_health():
    """
    Chat service health.

    Returns:
        Chat status, text-generation mode and configured limits
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "ai_enabled": text_generator is not None,
        "max_message_length": settings.chat_max_message_length,
        "session_timeout_minutes": settings.chat_session_timeout_minutes
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "concierge.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
