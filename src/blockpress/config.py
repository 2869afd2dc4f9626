"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "BLOCKPRESS_"


class Settings(BaseModel):
    app_name:              str = "blockpress"
    db_url:                str = "sqlite:///blockpress.db"
    output_dir:            str = Field(default="dist", description="Directory for rendered HTML pages + JSON sidecars")
    accent_color:          str = Field(default="#c9a96e", pattern="^#[0-9a-fA-F]{3,8}$", description="Fallback accent colour")
    enable_drop_cap:       bool = Field(default=True, description="Style the first paragraph with a drop cap")
    cms_base_url:          str = Field(default="", description="CMS origin whose absolute links are rewritten to relative")
    cloudinary_cloud_name: str = Field(default="dsq2xg1iw", description="Cloud name for data-public-id images")
    markdown_preset:       str = Field(default="gfm-like", description="MarkdownIt preset for .md sources")
    toc_levels:            list[int] = Field(default_factory=list, description="Heading levels shown in the TOC; empty = all")
    log_level:             str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @field_validator("toc_levels", mode="before")
    @classmethod
    def _split_levels(cls, v: Any) -> Any:
        """Accept '2,3' from environment variables."""
        if isinstance(v, str):
            return [int(p) for p in v.split(",") if p.strip()]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then BLOCKPRESS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
