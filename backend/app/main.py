import json, logging
from fastapi import FastAPI
from shared.config import settings
from backend.app.routes import history
from backend.app.services.messages import load_overrides

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("record-history")

app = FastAPI(title="Record History")

@app.on_event("startup")
async def _startup():
    # Locale overrides for user-facing messages
    if settings.messages_file:
        with open(settings.messages_file, "r", encoding="utf-8") as f:
            load_overrides(json.load(f))
        logger.info(f"Loaded message overrides from {settings.messages_file}")

app.include_router(history.router)
