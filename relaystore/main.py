import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# OpenTelemetry Imports (Basic Setup)
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from strawberry.fastapi import GraphQLRouter

from relaystore.core.config import settings
from relaystore.database import create_tables
from relaystore.graphql.schema import get_context, schema
from relaystore.logging_config import setup_logging

# Call setup_logging early, before creating app or loggers
setup_logging()
logger = logging.getLogger(__name__)

# --- Rate Limiting Setup ---
# Default limits apply to every route through SlowAPIMiddleware, GraphQL included
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.GRAPHQL_RATE_LIMIT])


def setup_opentelemetry(app: FastAPI):
    if not settings.OPENTELEMETRY_ENABLED:
        logger.info("OpenTelemetry tracing is disabled via OPENTELEMETRY_ENABLED setting.")
        return

    logger.info("Setting up OpenTelemetry")
    resource = Resource(attributes={SERVICE_NAME: "RelayStoreService"})
    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)

    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT
        logger.info(f"Configuring OTLP Exporter to: {endpoint}/v1/traces")
        exporter = OTLPSpanExporter(endpoint=f"{endpoint.strip('/')}/v1/traces")
    else:
        logger.warning("OTEL_EXPORTER_OTLP_ENDPOINT not set. Defaulting to ConsoleSpanExporter.")
        exporter = ConsoleSpanExporter()
    provider.add_span_processor(BatchSpanProcessor(exporter))

    FastAPIInstrumentor.instrument_app(app)
    logger.info("OpenTelemetry setup complete.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_opentelemetry(app)
    if settings.CREATE_TABLES_ON_STARTUP:
        await create_tables()
    logger.info("Application startup complete.")
    yield
    logger.info("Application shutdown.")


app = FastAPI(lifespan=lifespan)

# --- Add Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# --- GraphQL Setup ---
graphql_app: GraphQLRouter = GraphQLRouter(schema, context_getter=get_context)
app.include_router(graphql_app, prefix="/graphql")


@app.get("/health")
@limiter.exempt
async def health_check(request: Request):
    logger.debug("Health check endpoint called")
    return {"status": "ok"}


if __name__ == "__main__":
    # uvicorn is normally started from the command line
    import uvicorn

    logger.info("Starting Uvicorn directly for local testing")
    uvicorn.run(app, host="0.0.0.0", port=8000)
