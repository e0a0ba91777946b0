from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_file: str = "story_planner_data.json"
    static_dir: str = "static"

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Хеш passlib; пустое значение отключает вход администратора
    admin_password_hash: str = ""
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    admin_token_expire_minutes: int = 60

    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
