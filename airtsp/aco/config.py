import yaml
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


def load_config(path=None):
    """Load solver settings from a YAML file; missing keys fall back to the packaged defaults."""
    with open(DEFAULT_CONFIG_PATH, "r") as f:
        cfg = yaml.safe_load(f)
    if path is None:
        return cfg

    with open(Path(path), "r") as f:
        overrides = yaml.safe_load(f) or {}
    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(overrides).__name__}")

    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(cfg.get(key), dict):
            cfg[key] = {**cfg[key], **value}
        else:
            cfg[key] = value
    return cfg
