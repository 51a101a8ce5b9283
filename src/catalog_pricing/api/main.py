from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_pricing import __version__
from catalog_pricing.config.logging_config import setup_logger
from catalog_pricing.config.settings import get_settings
from catalog_pricing.api.catalog_api import router as catalog_router

setup_logger()

app = FastAPI(
    title="Catalog Pricing API",
    description="Unit-of-measure and multi-channel pricing for the product form",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Catalog Pricing API Active"}


@app.get("/system/status")
async def get_status():
    settings = get_settings()
    return {
        "engine_active": True,
        "version": __version__,
        "margin_type": settings.margin_type,
        "default_channel": {
            "id": settings.default_channel_id,
            "name": settings.default_channel_name,
        },
    }
