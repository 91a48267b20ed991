"""
Settings for branching conversations.

Handles loading and saving the id-derivation settings used by
ConversationTree.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class BranchingSettings(BaseModel):
    """How structural ids are built."""

    root_id: str = Field("conversation", min_length=1)
    default_branch_label: str = Field("branch", min_length=1)
    id_separator: str = "::"  # between a turn/anchor id and the derived part
    fragment_prefix: str = "part"
    suffix_separator: str = "-"  # before the numeric collision suffix


class SettingsManager:
    """
    Manages loading and saving settings.

    Settings are stored in JSON format at ~/.basket/branching/settings.json
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_dir: Configuration directory (default: ~/.basket/branching)
        """
        if config_dir is None:
            config_dir = Path.home() / ".basket" / "branching"

        self.config_dir = Path(config_dir)
        self.config_file = self.config_dir / "settings.json"

    def load(self) -> BranchingSettings:
        """
        Load settings from file.

        Returns:
            Settings object (defaults if file doesn't exist)
        """
        if not self.config_file.exists():
            return BranchingSettings()

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            return BranchingSettings(**data)
        except Exception as e:
            logger.warning("Failed to load settings, using defaults: %s", e)
            return BranchingSettings()

    def save(self, settings: BranchingSettings) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(settings.model_dump(), f, indent=2)

    def update(self, **kwargs: Any) -> BranchingSettings:
        """
        Update settings and save.

        Unknown keys are ignored. Values are validated against the schema.
        """
        data = self.load().model_dump()
        data.update({k: v for k, v in kwargs.items() if k in BranchingSettings.model_fields})
        settings = BranchingSettings(**data)
        self.save(settings)
        return settings

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key (supports dot notation into nested values)
            default: Default value if key doesn't exist

        Returns:
            Setting value or default
        """
        value: Any = self.load()

        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            elif isinstance(value, BaseModel) and part in type(value).model_fields:
                value = getattr(value, part)
            else:
                return default

        return value


__all__ = ["BranchingSettings", "SettingsManager"]
