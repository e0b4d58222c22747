"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from equipment_intel.config.models import IntelConfig, SelectorProfile


def load_config(path: Path | str) -> IntelConfig:
    """Load configuration from YAML file.

    ``scraper.selectors`` may be a mapping or a path to a selector profile
    YAML file, resolved relative to the config file.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated IntelConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f) or {}

    scraper = raw.get("scraper") or {}
    selectors = scraper.get("selectors")
    if isinstance(selectors, str):
        profile_path = Path(selectors)
        if not profile_path.is_absolute():
            profile_path = path.parent / profile_path
        scraper["selectors"] = _read_yaml(profile_path)
        raw["scraper"] = scraper

    return IntelConfig.model_validate(raw)


def load_selector_profile(path: Path | str) -> SelectorProfile:
    """Load a standalone selector profile."""
    return SelectorProfile.model_validate(_read_yaml(Path(path)))


def _read_yaml(path: Path) -> dict:
    with path.open() as f:
        return yaml.safe_load(f) or {}


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).resolve().parents[3] / "configs" / "default.yaml"
