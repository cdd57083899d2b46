"""Load ``.codelinkrc`` defaults for the command line."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from code_link.errors import ConfigError

logger = logging.getLogger(__name__)

RC_FILE = ".codelinkrc"


class RcConfig(BaseModel):
    """Options accepted in an rc file. String booleans ("true") are coerced."""

    model_config = ConfigDict(extra="forbid")

    destination: str | None = None
    include_extensions: list[str] | None = None
    skip_dirs: list[str] | None = None
    overwrite: bool | None = None
    strict: bool | None = None
    test: bool | None = None
    export_map: str | None = None
    manifest: bool | None = None
    verbose: bool | None = None

    @field_validator("overwrite", "strict", "test", "manifest", "verbose", mode="before")
    @classmethod
    def strip_boolean(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("include_extensions", "skip_dirs", mode="before")
    @classmethod
    def split_string(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("include_extensions")
    @classmethod
    def dotted_extensions(cls, value):
        if value is None:
            return value
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]


def load_rc_file(path: str | Path | None = None) -> RcConfig:
    """Read the rc file at ``path`` (or ``./.codelinkrc`` if it exists).

    A missing default rc file yields empty defaults; an explicit path that
    cannot be read is an error.
    """
    explicit = path is not None
    rc_path = Path(path) if explicit else Path(RC_FILE)
    if not rc_path.exists():
        if explicit:
            raise ConfigError(rc_path, "file not found")
        return RcConfig()

    try:
        data = json.loads(rc_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(rc_path, str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError(rc_path, "expected a JSON object")

    try:
        config = RcConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(rc_path, str(e)) from e
    logger.debug("Loaded rc file %s", rc_path)
    return config


def command_defaults(config: RcConfig) -> dict:
    """Translate rc options into click ``default_map`` entries per command."""
    options = config.model_dump(exclude_none=True)
    options.pop("verbose", None)
    if "include_extensions" in options:
        options["include_extensions"] = tuple(options["include_extensions"])

    link = dict(options)
    scan_only = {
        key: options[key] for key in ("include_extensions", "skip_dirs") if key in options
    }
    return {
        "link": link,
        "scan": scan_only,
        "order": scan_only,
        "graph": scan_only,
    }
