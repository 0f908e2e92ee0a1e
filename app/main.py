from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.responses import JSONResponse
from app.database import create_db_and_tables
from app.config import settings
from app.routes import (
    artworks,
    cart,
    customers,
    drops,
    health,
    orders,
    payments,
    public_settings,
    shipping,
)

from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager


# checkout bodies that fail validation get a fixed 400 instead of the 422 detail dump
VALIDATION_MESSAGES = {
    ("POST", "/api/shipping/rates"): "Invalid shipping request data",
    ("POST", "/api/stripe/create-payment-intent"): "Invalid payment request data",
    ("POST", "/api/orders"): "Invalid order data",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="StudioDrop API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = VALIDATION_MESSAGES.get((request.method, request.url.path))
    if message:
        return JSONResponse(status_code=400, content={"detail": message})
    return await request_validation_exception_handler(request, exc)


app.include_router(health.router, prefix="/api/health", tags=["Health"])
app.include_router(artworks.router, prefix="/api/artworks", tags=["Artworks"])
app.include_router(drops.router, prefix="/api/drops", tags=["Drops"])
app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
app.include_router(shipping.router, prefix="/api/shipping", tags=["Shipping"])
app.include_router(payments.router, prefix="/api/stripe", tags=["Payments"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(public_settings.router, prefix="/api/settings", tags=["Public Settings"])


@app.get("/")
def root():
    return {
        "store": settings.STORE_NAME,
        "checkout_endpoints": [
            "/api/shipping/rates",
            "/api/stripe/create-payment-intent",
            "/api/stripe/config",
            "/api/orders",
        ],
        "catalog_endpoints": [
            "/api/artworks", "/api/artworks/{artwork_id}",
            "/api/drops", "/api/drops/{drop_id}",
        ],
        "cart": [
            "/api/cart/{owner}", "/api/cart/{owner}/items",
            "/api/cart/{owner}/items/{artwork_id}", "/api/cart/{owner}/merge-guest",
        ],
    }
