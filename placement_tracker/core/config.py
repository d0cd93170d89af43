from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    mongo_uri: str
    secret_key: str
    algorithm: str = "HS256"
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    default_page_size: int = 10
    max_page_size: int = 100
    slow_request_threshold: float = 1.0

    class Config:
        env_file = (".env",)
        extra = "allow"


settings = Settings()
