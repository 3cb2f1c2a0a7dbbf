"""
Run configuration for dsconv.

A DSConvConfig value is built once per run (from defaults, an optional YAML
file, then command-line overrides) and handed to the reporter, emitter and
CLI explicitly. The scanner itself takes no configuration.

YAML format (every key optional):

    silent: false
    log_file: reports/dsconv.log
    output_file: generated/structs.c
    jsonl_file: reports/declarations.jsonl
    generate_struct: true
    struct_var_name: table
    struct_tag: s
    wrap_width: 12            # omit or null for unwrapped value lines
    placeholder: uninit
    emit:
      wrap_member: true
      internal_init: true
      external_assign: false
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from dsconv.errors import ConfigError
from dsconv.report import UNINITIALIZED_PLACEHOLDER
from dsconv.struct_emit import DEFAULT_STRUCT_TAG, DEFAULT_VAR_NAME, EmitOptions, is_c_identifier


@dataclass(frozen=True)
class DSConvConfig:
    """Options for one dsconv run."""

    silent: bool = False
    log_file: Optional[Path] = None
    output_file: Optional[Path] = None
    jsonl_file: Optional[Path] = None
    generate_struct: bool = False
    struct_var_name: str = DEFAULT_VAR_NAME
    struct_tag: str = DEFAULT_STRUCT_TAG
    wrap_width: Optional[int] = None
    placeholder: str = UNINITIALIZED_PLACEHOLDER
    emit: EmitOptions = field(default_factory=EmitOptions)

    def __post_init__(self):
        if not is_c_identifier(self.struct_var_name):
            raise ConfigError(f"struct_var_name is not a valid C identifier: {self.struct_var_name!r}")
        if not is_c_identifier(self.struct_tag):
            raise ConfigError(f"struct_tag is not a valid C identifier: {self.struct_tag!r}")
        if self.wrap_width is not None and self.wrap_width < 1:
            raise ConfigError(f"wrap_width must be positive, got {self.wrap_width}")
        if not self.placeholder:
            raise ConfigError("placeholder must not be empty")

    def merged(self, **overrides: Any) -> 'DSConvConfig':
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigError(f"Unknown config option(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def summary(self) -> str:
        """Return a human-readable summary of the active options."""
        emit = self.emit
        return (
            f"silent={self.silent} log_file={self.log_file} output_file={self.output_file} "
            f"jsonl_file={self.jsonl_file} generate_struct={self.generate_struct} "
            f"var={self.struct_var_name} tag={self.struct_tag} wrap_width={self.wrap_width} "
            f"emit(wrap_member={emit.wrap_member}, internal_init={emit.internal_init}, "
            f"external_assign={emit.external_assign})"
        )


# =============================================================================
# YAML loading
# =============================================================================

_BOOL_KEYS = {'silent', 'generate_struct'}
_PATH_KEYS = {'log_file', 'output_file', 'jsonl_file'}
_STR_KEYS = {'struct_var_name', 'struct_tag', 'placeholder'}
_EMIT_KEYS = {'wrap_member', 'internal_init', 'external_assign'}


def _expect(key: str, value: Any, expected: type) -> Any:
    # bool is a subclass of int; reject it where an int is wanted
    if expected is int and isinstance(value, bool):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigError(f"'{key}' must be of type {expected.__name__}, got {value!r}")
    return value


def _parse_emit(data: Any) -> EmitOptions:
    if not isinstance(data, dict):
        raise ConfigError("'emit' must be a mapping")
    unknown = set(data) - _EMIT_KEYS
    if unknown:
        raise ConfigError(f"Unknown emit option(s): {', '.join(sorted(unknown))}")
    return EmitOptions(**{key: _expect(f"emit.{key}", value, bool) for key, value in data.items()})


def config_from_dict(data: dict) -> DSConvConfig:
    """Build a config from a parsed YAML mapping."""
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in _BOOL_KEYS:
            kwargs[key] = _expect(key, value, bool)
        elif key in _PATH_KEYS:
            kwargs[key] = None if value is None else Path(_expect(key, value, str))
        elif key in _STR_KEYS:
            kwargs[key] = _expect(key, value, str)
        elif key == 'wrap_width':
            kwargs[key] = None if value is None else _expect(key, value, int)
        elif key == 'emit':
            kwargs[key] = _parse_emit(value)
        else:
            raise ConfigError(f"Unknown config option: '{key}'")
    return DSConvConfig(**kwargs)


def load_config(path: Path) -> DSConvConfig:
    """
    Load a config file.

    Args:
        path: YAML file

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file is missing, not valid YAML, or has bad options
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}")

    if data is None:
        return DSConvConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return config_from_dict(data)
