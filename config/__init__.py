import os

_ENVIRONMENTS = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "dev": "config.development",
    "development": "config.development",
}


def get_settings_module() -> str:
    """Dotted settings module for the current process.

    ``SETTINGS_MODULE`` wins when set; otherwise ``APP_ENV`` picks one of the
    bundled modules and anything unknown falls back to development.
    """
    explicit = os.getenv("SETTINGS_MODULE", "").strip()
    if explicit:
        return explicit
    return _ENVIRONMENTS.get(os.getenv("APP_ENV", "development").strip().lower(), "config.development")
