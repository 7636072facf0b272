import logging

from fastapi import FastAPI

from brewlog.api import auth, effect_mappings, recommendations
from brewlog.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Brewlog", version="0.1.0")


# Include routers
app.include_router(auth.router)
app.include_router(recommendations.router)
app.include_router(effect_mappings.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
