"""Resolve command-line inputs (file paths, inline code) into text buffers."""

import logging
from dataclasses import dataclass
from pathlib import Path

from dsconv.errors import TargetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """One input buffer and the label it is reported under."""

    label: str
    text: str


def file_target(path: Path) -> Target:
    """Read a source file; undecodable bytes are replaced, not fatal."""
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8', errors='replace')
    except FileNotFoundError:
        raise TargetError(f"Input file not found: {path}")
    except IsADirectoryError:
        raise TargetError(f"Input is a directory: {path}")
    except OSError as e:
        raise TargetError(f"Cannot read {path}: {e.strerror or e}")
    logger.debug(f"Read {len(text):,} characters from {path}")
    return Target(label=str(path), text=text)


def inline_target(text: str, number: int = 1) -> Target:
    return Target(label=f"<inline #{number}>", text=text)

