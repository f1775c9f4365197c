"""
Configuration schema for itchtables.

Supports:
- YAML file loading
- Environment variable substitution (${VAR_NAME})
- Validation with error messages

Example config (itchtables.yml):
    version: 1

    decode:
      buffer_size: 100000000
      framing: prefixed

    output:
      format: parquet
      directory: ${ITCH_OUTPUT_DIR}
"""

import os
import re
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Any

import yaml

from ..formats.scanner import DEFAULT_BUFFER_SIZE, FRAMINGS, FRAMING_RAW

OUTPUT_FORMATS = ('csv', 'parquet', 'json')


def _substitute_env_vars(value: Any) -> Any:
    """
    Substitute ${VAR_NAME} with environment variable values.

    Example:
        ${ITCH_OUTPUT_DIR} → os.environ.get('ITCH_OUTPUT_DIR')
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}]+)\}'

        def replace(match):
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                return match.group(0)  # Keep original if not found
            return env_value

        return re.sub(pattern, replace, value)

    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]

    return value


@dataclass
class DecodeConfig:
    """Decoding settings."""
    buffer_size: int = DEFAULT_BUFFER_SIZE
    framing: str = FRAMING_RAW
    quiet: bool = False


@dataclass
class OutputConfig:
    """Table export settings."""
    format: str = 'csv'
    directory: str = '.'
    add_datetime: bool = True

    @property
    def path(self) -> Path:
        return Path(self.directory)


@dataclass
class ItchConfig:
    """Root configuration."""

    version: int = 1
    decode: DecodeConfig = field(default_factory=DecodeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def load(cls, path: Path) -> 'ItchConfig':
        """Load from YAML file with env var substitution."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data = _substitute_env_vars(data)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'ItchConfig':
        """Create from dictionary."""
        return cls(
            version=data.get('version', 1),
            decode=DecodeConfig(**data.get('decode', {})),
            output=OutputConfig(**data.get('output', {})),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Convert to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate config. Returns list of errors (empty if valid)."""
        errors = []

        buffer_size = self.decode.buffer_size
        if not isinstance(buffer_size, int) or isinstance(buffer_size, bool) or buffer_size <= 0:
            errors.append(f"Invalid buffer_size: {buffer_size}")

        if self.decode.framing not in FRAMINGS:
            errors.append(
                f"Invalid framing: {self.decode.framing} (expected one of {', '.join(FRAMINGS)})"
            )

        if self.output.format not in OUTPUT_FORMATS:
            errors.append(
                f"Invalid output format: {self.output.format} "
                f"(expected one of {', '.join(OUTPUT_FORMATS)})"
            )

        if '${' in self.output.directory:
            errors.append(f"Unresolved environment variable in output directory: {self.output.directory}")

        return errors


def load_config(path: Optional[Path] = None) -> ItchConfig:
    """Load config from file or return defaults."""
    if path and Path(path).exists():
        return ItchConfig.load(path)

    search_paths = [
        Path('./itchtables.yml'),
        Path('./itchtables.yaml'),
        Path.home() / '.itchtables' / 'config.yml',
    ]

    for p in search_paths:
        if p.exists():
            return ItchConfig.load(p)

    return ItchConfig()


def generate_default_config() -> str:
    """Generate default config as YAML."""
    return """# itchtables configuration
version: 1

decode:
  buffer_size: 100000000
  framing: raw
  quiet: false

output:
  format: csv
  directory: .
  add_datetime: true
"""
