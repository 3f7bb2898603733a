"""Console data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class LogSeverity(Enum):
  """Severity tag attached to every console entry."""

  INFO = 'INFO'
  WARNING = 'WARNING'
  ERROR = 'ERROR'
  DEBUG = 'DEBUG'

  @property
  def tag(self) -> str:
    """Bracketed tag used in rendered lines, e.g. ``[ERROR]``."""
    return f'[{self.value}]'


@dataclass(frozen=True)
class LogEntry:
  """A single classified console line."""

  id: int
  timestamp: datetime
  severity: LogSeverity
  message: str

  @property
  def is_error(self) -> bool:
    return self.severity is LogSeverity.ERROR


@dataclass(frozen=True)
class DeviceInfo:
  """Host description shown in the console header and the copied text."""

  system_version: str
  name: str
  model: str
