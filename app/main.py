from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .db.init_db import init_db, seed_products
from .db.session import SessionLocal
from .api import products, cart, cart_items, orders, ws
from .core.config import settings
from .core.debug import logger
from .middleware import RequestLoggingMiddleware
from .realtime.registry import ConnectionRegistry


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.seed_products:
        with SessionLocal() as db:
            if inserted := seed_products(db):
                logger.info(f"Seeded {inserted} sample products")
    app.state.connections = ConnectionRegistry()
    yield
    logger.info(f"Shutting down with {len(app.state.connections)} open connections")


app = FastAPI(
    title="Smart Cart API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# ADD MIDDLEWARES
## ADD REQUEST LOGGING MIDDLEWARE
app.add_middleware(RequestLoggingMiddleware)

## ADD CORS MIDDLEWARE
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.allow_credentials,
    allow_methods=settings.allowed_methods,
    allow_headers=["*"],
)


app.include_router(products.router)
app.include_router(cart.router)
app.include_router(cart_items.router)
app.include_router(orders.router)
app.include_router(ws.router)


@app.head("/", include_in_schema=False)
@app.get("/", include_in_schema=False)
def read_root():
    return {"status": "ok"}
