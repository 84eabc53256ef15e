import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from paperbot.config import settings
from paperbot.logging_config import setup_logging
from paperbot.routers import notifications, telegram_webhook

setup_logging(settings.log_level)

app = FastAPI(
    title="PaperBot API",
    description="Telegram bot and dashboard notifications for paper-roll inventory",
    version="0.1.0",
    debug=settings.debug,
)

cors_env = os.environ.get("CORS_ALLOW_ORIGINS", "*")
cors_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]
if not cors_origins:
    cors_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(telegram_webhook.router)
app.include_router(notifications.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
