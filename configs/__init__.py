"""Configuration module for CanalSim."""

from pathlib import Path
import yaml

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default.yaml"
SCENARIO_DIR = CONFIG_DIR / "scenarios"


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def merge_configs(base_config: dict, override_config: dict) -> dict:
    """Merge two configuration dictionaries.

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = base_config.copy()
    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def available_scenarios() -> list:
    """Names of the bundled scenario files."""
    return sorted(p.stem for p in SCENARIO_DIR.glob("*.yaml"))


def load_scenario(name: str) -> dict:
    """Load a bundled scenario merged over the defaults.

    Args:
        name: Scenario name, e.g. 'validation' or 'experiment1'

    Returns:
        Full configuration dictionary

    Raises:
        FileNotFoundError: If no such scenario is bundled
    """
    path = SCENARIO_DIR / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(
            f"Unknown scenario {name!r}, available: {', '.join(available_scenarios())}"
        )
    return merge_configs(load_config(str(DEFAULT_CONFIG_PATH)), load_config(str(path)))
