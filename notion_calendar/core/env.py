import os

from dotenv import load_dotenv


def load_env() -> None:
    load_dotenv()


def get_required_env(name: str) -> str:
    value = get_optional_env(name)
    if value is None:
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def get_optional_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()
