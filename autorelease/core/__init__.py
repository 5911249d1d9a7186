"""Core types: results, configuration, exit codes."""

from .config import ConfigError, ReleaseConfig, RepoSlug, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "ReleaseConfig",
    "RepoSlug",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
