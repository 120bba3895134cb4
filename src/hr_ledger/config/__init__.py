import importlib
import os
from types import ModuleType

from dotenv import load_dotenv


def get_settings_module() -> str:
    # Environment from APP_ENV, defaults to 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hr_ledger.config.production"

    if env in {"test", "testing"}:
        return "hr_ledger.config.testing"

    return "hr_ledger.config.development"


def load_settings() -> ModuleType:
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}
