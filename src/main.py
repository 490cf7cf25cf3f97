"""
Play Arena FastAPI Application

Startup order: tracing, DI wiring, Kvrocks, PostgreSQL pool + schema.
Shutdown drains pending notifications before closing the Kafka producer.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.asyncpg_setting import (
    close_all_asyncpg_pools,
    ensure_schema,
    get_asyncpg_pool,
)
from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.event_publisher import close_producer
from src.platform.observability.tracing import TracingConfig
from src.platform.state.kvrocks_client import kvrocks_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Play Arena] Starting up...')

    tracing = TracingConfig(service_name='play-arena-service')
    tracing.setup()
    tracing.instrument_redis()
    Logger.base.info('📊 [Play Arena] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Play Arena] Dependency injection wired')

    # Fail fast if Kvrocks is unreachable
    await kvrocks_client.initialize()
    Logger.base.info('📡 [Play Arena] Kvrocks initialized')

    await get_asyncpg_pool()
    await ensure_schema()
    Logger.base.info('🏊 [Play Arena] Asyncpg pool initialized, schema ensured')

    Logger.base.info('✅ [Play Arena] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Play Arena] Shutting down...')

    await container.notification_dispatcher().aclose()

    try:
        await close_producer()
        Logger.base.info('📤 [Play Arena] Kafka producer closed')
    except Exception as e:
        Logger.base.error(f'❌ [Play Arena] Failed to close Kafka producer: {e}')

    await close_all_asyncpg_pools()
    Logger.base.info('🏊 [Play Arena] Asyncpg pools closed')

    await kvrocks_client.disconnect()
    Logger.base.info('📡 [Play Arena] Kvrocks disconnected')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Play Arena] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
