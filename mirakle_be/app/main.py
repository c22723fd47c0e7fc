from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import auth
from app.routers import products
from app.routers import cart
from app.routers import addresses
from app.routers import banners
from app.routers import contact
from app.routers import payments
from app.routers import location
from app.routers import user as user_router
from app.utils.errors import register_error_handlers
from app.utils.storage import MEDIA_ROOT

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure all DB tables exist after all models are imported
    from app.models.user import Base, engine  # Base/engine single source
    from app.models import product, cart, address, banner, contact  # noqa: F401 register models
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
    yield


app = FastAPI(title="Mirakle API", lifespan=lifespan)
register_error_handlers(app)


# Ensure media directory exists before mounting
MEDIA_ROOT.mkdir(parents=True, exist_ok=True)

# Serve uploaded media files
app.mount("/media", StaticFiles(directory=str(MEDIA_ROOT)), name="media")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(user_router.router, prefix="/api/user", tags=["user"])
app.include_router(addresses.router, prefix="/api/user/address", tags=["addresses"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
app.include_router(banners.router, prefix="/api/banners", tags=["banners"])
app.include_router(contact.router, prefix="/api/contact", tags=["contact"])
app.include_router(payments.router, prefix="/api/payment", tags=["payment"])
app.include_router(location.router, prefix="/api/location", tags=["location"])


@app.get("/")
def root():
    return "Mirakle Server is Running"


@app.get("/api/test")
def health():
    return {
        "message": "Server is working",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "env": os.environ.get("ENVIRONMENT", "development"),
    }


# --- Entry point for local runs ---
if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 7000))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=False)
