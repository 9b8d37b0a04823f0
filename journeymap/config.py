"""Configuration loading for the journey map engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048
    timeout: float = 120.0


class ChartConfig(BaseModel):
    slot_width: float = 160
    offset: float = 80  # x of the first step; half a slot by default
    height: float = 400
    amplitude: float = 160  # distance from midline at experience level 5
    render_scale: int = 1


class EditorConfig(BaseModel):
    cadence_days: int = Field(default=7, ge=0)


class Config(BaseModel):
    db_path: str = "data/journeymap.db"
    llm: LLMConfig = Field(default_factory=LLMConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)

    @property
    def resolved_db_path(self) -> Path:
        """Resolve db_path relative to project root."""
        p = Path(self.db_path)
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    """Return the journeymap project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
