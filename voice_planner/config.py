from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine configuration."""

    default_timezone: str = "UTC"

    fuzzy_max_distance: int = 2
    query_keyword_min_length: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
