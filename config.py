"""Purse settings, stored as TOML at ~/.config/purse.toml.

The file is written with defaults on first run. Every key is optional; a
missing key falls back to its default, so older files keep working.
"""

from pathlib import Path
from dataclasses import dataclass
import logging
import tomllib
import tomli_w

from errors import ConfigError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_base_dir() -> Path:
    return Path.home() / "data" / "purse"


@dataclass
class Config:
    """Where Purse keeps its data and how it reports."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    default_user: str = "default"
    currency: str = "KZT"

    @property
    def db_path(self) -> Path:
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        return cls.from_toml({})

    @classmethod
    def from_toml(cls, data: dict) -> "Config":
        """Build a Config from parsed TOML, filling in defaults.

        Raises:
            ConfigError: If the log level or the ledger settings are unusable.
        """
        base_dir = Path(data.get("base_dir", default_base_dir()))
        database = data.get("database", {})
        logs = data.get("logging", {})
        ledger = data.get("ledger", {})

        log_level = str(logs.get("level", "INFO")).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(
                f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )

        default_user = str(ledger.get("default_user", "default")).strip()
        if not default_user:
            raise ConfigError("ledger.default_user must not be empty")

        currency = str(ledger.get("currency", "KZT")).strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ConfigError(f"ledger.currency must be a 3-letter code, got {currency!r}")

        return cls(
            base_dir=base_dir,
            db_data_dir=Path(database.get("data_dir", base_dir / "db")),
            db_filename=database.get("filename", "purse.db"),
            log_level=log_level,
            log_dir=Path(logs.get("log_dir", base_dir / "logs")),
            default_user=default_user,
            currency=currency,
        )

    def to_toml(self) -> dict:
        return {
            "base_dir": str(self.base_dir),
            "database": {"data_dir": str(self.db_data_dir), "filename": self.db_filename},
            "logging": {"level": self.log_level, "log_dir": str(self.log_dir)},
            "ledger": {"default_user": self.default_user, "currency": self.currency},
        }


def get_config_path() -> Path:
    return Path.home() / ".config" / "purse.toml"


def get_migrations_dir() -> Path:
    """Migrations ship with the code and are not configurable."""
    return Path(__file__).parent / "db" / "migrations"


def load_config(config_path: Path = None) -> Config:
    """Read the config file, creating it with defaults if it is missing.

    Args:
        config_path: Optional override for the config file location.

    Raises:
        ConfigError: If the file is not valid TOML or holds unusable values.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        config = Config.default()
        save_config(config, config_path)
        logging.getLogger("purse").debug(f"Wrote default config to {config_path}")
        return config

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_path} is not valid TOML: {e}")

    return Config.from_toml(data)


def save_config(config: Config, config_path: Path) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(config.to_toml(), f)
