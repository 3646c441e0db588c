"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from carbcycle.exceptions import ConfigError
from carbcycle.optimizer.models import SolverConfig


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".carbcycle"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "carbcycle.db"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class CatalogConfig:
    """Built-in food catalog location."""

    path: Optional[Path] = None


@dataclass
class SolverSettings:
    """Quantity solver configuration."""

    step: float = 5.0
    max_iterations: int = 1500
    seed_fraction: float = 0.7
    tolerance: float = 1.0

    def to_solver_config(self) -> SolverConfig:
        return SolverConfig(
            step=self.step,
            max_iterations=self.max_iterations,
            seed_fraction=self.seed_fraction,
            tolerance=self.tolerance,
        )


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table", "json", "markdown"
    language: str = "en"  # "en" or "zh"
    log_level: str = "WARNING"


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    solver: SolverSettings = field(default_factory=SolverSettings)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.carbcycle/config.yaml

        Returns:
            Settings instance

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse settings file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {config_path} must be a mapping")

        settings = cls()

        if "database" in data:
            db_data = data["database"] or {}
            if db_data.get("path"):
                settings.database.path = Path(db_data["path"]).expanduser()

        if "catalog" in data:
            catalog_data = data["catalog"] or {}
            if catalog_data.get("path"):
                settings.catalog.path = Path(catalog_data["path"]).expanduser()

        if "solver" in data:
            solver_data = data["solver"] or {}
            if "step" in solver_data:
                settings.solver.step = float(solver_data["step"])
            if "max_iterations" in solver_data:
                settings.solver.max_iterations = int(solver_data["max_iterations"])
            if "seed_fraction" in solver_data:
                settings.solver.seed_fraction = float(solver_data["seed_fraction"])
            if "tolerance" in solver_data:
                settings.solver.tolerance = float(solver_data["tolerance"])

        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]
            if "language" in def_data:
                settings.defaults.language = def_data["language"]
            if "log_level" in def_data:
                settings.defaults.log_level = str(def_data["log_level"]).upper()

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.carbcycle/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
            },
            "catalog": {
                "path": str(self.catalog.path) if self.catalog.path else None,
            },
            "solver": {
                "step": self.solver.step,
                "max_iterations": self.solver.max_iterations,
                "seed_fraction": self.solver.seed_fraction,
                "tolerance": self.solver.tolerance,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
                "language": self.defaults.language,
                "log_level": self.defaults.log_level,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
