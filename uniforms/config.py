from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"

    # Firebase project descriptor
    firebase_api_key: str = ""
    firebase_project_id: str = ""
    firebase_app_id: str = ""
    firestore_database: str = "(default)"
    service_account_file: Path = Path("service_account.json")

    use_in_memory_backend: bool = False
    share_link_base: str = ""
    # How often a live subscription rechecks whether its stream has closed
    subscription_poll_seconds: float = 1.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def uses_firebase(self) -> bool:
        return bool(self.firebase_project_id) and not self.use_in_memory_backend


@lru_cache
def get_settings() -> Settings:
    return Settings()
