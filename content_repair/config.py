# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load all configuration from environment variables / .env
#   file. Provides typed config objects to the other modules.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     uri: str | None      (default None; overrides host/port/user/password)
#     host: str            (default "localhost")
#     port: int            (default 27017)
#     user: str | None     (default None)
#     password: str | None (default None)
#     database: str        (default "content_db")
#
# - RepairConfig (dataclass)
#     dry_run: bool                    (default False)
#     snippet_catalog_path: str | None (default None → bundled catalog)
#
# - AppConfig (dataclass)
#     mongo: MongoConfig
#     repair: RepairConfig
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# ENVIRONMENT:
# ------------
#   MONGO_URI, MONGO_HOST, MONGO_PORT, MONGO_USER, MONGO_PASSWORD,
#   MONGO_DATABASE, REPAIR_DRY_RUN, SNIPPET_CATALOG_PATH
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class MongoConfig:
    """MongoDB connection configuration."""
    uri: Optional[str] = None
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "content_db"


@dataclass
class RepairConfig:
    """Behaviour of the repair jobs."""
    dry_run: bool = False
    snippet_catalog_path: Optional[str] = None


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig = field(default_factory=MongoConfig)
    repair: RepairConfig = field(default_factory=RepairConfig)


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUE_VALUES


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mongo_config = MongoConfig(
        uri=os.getenv("MONGO_URI") or None,
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "content_db")
    )

    repair_config = RepairConfig(
        dry_run=_env_flag("REPAIR_DRY_RUN"),
        snippet_catalog_path=os.getenv("SNIPPET_CATALOG_PATH") or None
    )

    _config_instance = AppConfig(
        mongo=mongo_config,
        repair=repair_config
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
