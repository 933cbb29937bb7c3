"""
Runtime Configuration Store.

Settings are read from the ``[tool.live_mirrors]`` table of the nearest
``pyproject.toml`` and can be overridden programmatically or from the CLI.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class MirrorConfig(BaseModel):
  """
  Global configuration container for mirrors and the CLI.
  """

  static_fallback: bool = Field(
    True,
    description="Allow the file resolver to fall back to static analysis (griffe) when runtime data is missing.",
  )
  log_level: str = Field("WARNING", description="Threshold for the 'live_mirrors' logger.")
  max_depth: int = Field(2, ge=0, description="Default depth of the CLI nested-class tree.")

  @field_validator("log_level")
  @classmethod
  def validate_log_level(cls, v: str) -> str:
    """
    Normalizes and validates the log level name.

    Args:
        v (str): Level name, case-insensitive.

    Returns:
        str: The upper-case level name.

    Raises:
        ValueError: If the level is not a standard logging level.
    """
    v_clean = v.strip().upper()
    if v_clean not in _LOG_LEVELS:
      raise ValueError(f"Unknown log level: '{v}'. Supported levels: {list(_LOG_LEVELS)}")
    return v_clean

  @property
  def log_level_number(self) -> int:
    """The numeric ``logging`` level."""
    return logging.getLevelName(self.log_level)

  @classmethod
  def load(
    cls,
    static_fallback: Optional[bool] = None,
    log_level: Optional[str] = None,
    max_depth: Optional[int] = None,
    search_path: Optional[Path] = None,
  ) -> "MirrorConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        static_fallback (Optional[bool]): Override for the static resolver fallback.
        log_level (Optional[str]): Override for the log level.
        max_depth (Optional[int]): Override for the CLI tree depth.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        MirrorConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    values: Dict[str, Any] = {}
    for key, override in (
      ("static_fallback", static_fallback),
      ("log_level", log_level),
      ("max_depth", max_depth),
    ):
      if override is not None:
        values[key] = override
      elif key in toml_config:
        values[key] = toml_config[key]

    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("live_mirrors", {}), parent

  return {}, None
