from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Mythweaver"
    database_url: str = "sqlite:///./mythweaver.db"
    debug: bool = False
    log_level: str = "INFO"
    realtime_enabled: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
