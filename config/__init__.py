import os

_ENV_MODULES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
    "dev": "development",
    "development": "development",
}


def get_settings_module(env: str | None = None) -> str:
    """Dotted settings module for APP_ENV; unknown values fall back to development."""
    env = (env or os.getenv("APP_ENV", "development")).strip().lower()
    return f"config.{_ENV_MODULES.get(env, 'development')}"
