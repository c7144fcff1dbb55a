from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"
    NOTION_API_BASE_URL: str = "https://api.notion.com"
    NOTION_API_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT_S: float = 10.0
    PUBLIC_BASE_URL: str = ""


settings = Settings()
