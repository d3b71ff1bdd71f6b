import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.config import settings
from marketplace.database import create_db_and_tables
from marketplace.exceptions import MarketplaceError
from marketplace.routes import (
    carriers,
    cart,
    categories,
    checkout,
    health,
    orders,
    products,
    seller_dashboard,
    seller_inventory,
    seller_orders,
    seller_products,
    users,
)

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local, migrations handle everything else
    if settings.env == "local":
        create_db_and_tables()
    logger.info(f"Marketplace API starting ({settings.env})")
    yield
    logger.info("Marketplace API shutting down")

app = FastAPI(title="Fashion Marketplace API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(seller_products.router, prefix="/seller/products", tags=["Seller Products"])
app.include_router(seller_inventory.router, prefix="/seller/inventory", tags=["Seller Inventory"])
app.include_router(seller_orders.router, prefix="/seller/orders", tags=["Seller Orders"])
app.include_router(seller_dashboard.router, prefix="/seller/dashboard", tags=["Seller Dashboard"])
app.include_router(carriers.router, prefix="/carriers", tags=["Carriers"])


@app.get("/")
def root():
    return {
        "catalog": ["/categories", "/products", "/products/{product_id}"],
        "cart": ["/cart", "/cart/add", "/cart/update/{id}", "/cart/remove/{id}", "/cart/clear"],
        "checkout": ["/checkout/quote", "/checkout/promo", "/checkout/place-order"],
        "orders": ["/orders", "/orders/{order_id}", "/orders/{order_id}/cancel"],
        "seller": [
            "/seller/products", "/seller/inventory", "/seller/orders",
            "/seller/dashboard", "/carriers",
        ],
    }
