from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    telegram_bot_token: str = ""
    telegram_webhook_secret: str = ""
    firestore_project_id: str = ""
    firestore_api_key: str = ""
    firestore_page_size: int = 300
    admin_chat_ids: list[int] = []

    store_timeout_seconds: float = 10.0
    telegram_timeout_seconds: float = 30.0
    lookup_timeout_seconds: float = 8.0
    send_timeout_seconds: float = 15.0

    session_ttl_seconds: int = 900
    button_label_limit: int = 60

    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
