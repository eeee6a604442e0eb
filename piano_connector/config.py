"""Connector policy and destination settings files."""
import os
import yaml
from dataclasses import dataclass
from pathlib import Path

TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class PianoSettings:
    """Connector policy, shared by every call it serves."""
    # Identity events are mapped to "identify"; some deployments turn them off.
    user_events_enabled: bool = True

    @classmethod
    def from_env(cls) -> "PianoSettings":
        """Load settings from environment variables."""
        return cls(
            user_events_enabled=os.environ.get(
                "PIANO_USER_EVENTS_ENABLED", "true"
            ).strip().lower() in TRUTHY,
        )


def load_settings(path: str | Path) -> dict[str, str]:
    """Read destination settings (piano_site_id, piano_collection_domain, ...) from YAML."""
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file {path} must contain a mapping, got {type(raw).__name__}")
    return {str(key): "" if value is None else str(value) for key, value in raw.items()}
