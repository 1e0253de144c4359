"""
CertMaker — Application configuration.
Loads .env automatically, then reads all settings from environment variables.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path)

KNOWN_TEMPLATES = ("standard", "elegant")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""
    data_dir: Path
    secret_key: str
    font_dir: str
    default_template: str
    log_level: str = "INFO"

    @property
    def certificates_dir(self) -> Path:
        return self.data_dir / "certificates"


def _load_config() -> AppConfig:
    return AppConfig(
        data_dir=Path(
            os.getenv("CERTMAKER_DATA_DIR", str(Path.home() / ".certmaker"))
        ).expanduser(),
        secret_key=os.getenv("CERTMAKER_SECRET_KEY", ""),
        font_dir=os.getenv("CERTMAKER_FONT_DIR", ""),
        default_template=os.getenv("CERTMAKER_DEFAULT_TEMPLATE", "standard").lower(),
        log_level=os.getenv("CERTMAKER_LOG_LEVEL", "INFO").strip().upper(),
    )


def _validate_config(cfg: AppConfig) -> None:
    """Fail fast on settings no generator could run with."""
    problems: list[str] = []
    if cfg.default_template not in KNOWN_TEMPLATES:
        problems.append(
            f"CERTMAKER_DEFAULT_TEMPLATE={cfg.default_template!r} "
            f"(expected one of: {', '.join(KNOWN_TEMPLATES)})"
        )
    if cfg.font_dir and not Path(cfg.font_dir).is_dir():
        problems.append(f"CERTMAKER_FONT_DIR={cfg.font_dir!r} is not a directory")
    if cfg.log_level not in LOG_LEVELS:
        problems.append(
            f"CERTMAKER_LOG_LEVEL={cfg.log_level!r} "
            f"(expected one of: {', '.join(LOG_LEVELS)})"
        )
    if problems:
        print(
            f"\n  ERROR: Invalid CertMaker settings: {'; '.join(problems)}\n"
            f"  Fix backend/.env or unset the variables to use the defaults.\n",
            file=sys.stderr,
        )
        sys.exit(1)


settings = _load_config()
_validate_config(settings)
