"""
Centralized settings and path configuration for the pricing engine.
"""
import logging
import os
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the repository root (the first parent holding pyproject.toml)."""
    settings_file = Path(__file__).resolve()
    for parent in settings_file.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Layout is <root>/src/cleaning_pricing/config/settings.py
    return settings_file.parents[3]


def _env_decimal(name: str, default: str) -> Decimal:
    """Read a decimal environment variable, naming it on bad input."""
    raw = os.getenv(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{name} must be a decimal number, got {raw!r}") from None


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Default service definition used by scripts
    service_file: Path

    # Rounding applied once to the final total
    rounding_quantum: Decimal = Decimal('0.01')
    rounding_mode: str = ROUND_HALF_EVEN

    log_level: str = 'WARNING'

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment and project structure."""
        root = project_root or get_project_root()

        service_file = os.getenv('CLEANING_PRICING_SERVICE_FILE')
        if service_file:
            service_path = Path(service_file)
        else:
            service_path = Path(__file__).resolve().parent.parent / 'data' / 'standard_clean.json'

        return cls(
            project_root=root,
            service_file=service_path,
            rounding_quantum=_env_decimal('CLEANING_PRICING_ROUNDING_QUANTUM', '0.01'),
            log_level=os.getenv('CLEANING_PRICING_LOG_LEVEL', 'WARNING').upper(),
        )


# Populated on first get_settings() call
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def configure_logging(settings: Optional[Settings] = None):
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
