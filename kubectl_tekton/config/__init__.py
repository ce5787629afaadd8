"""Configuration for the Tekton Results client."""

from .provider import (
    ConfigProvider,
    EnvConfigProvider,
    FileConfigProvider,
    ImpersonationConfig,
    ResultsConfig,
    TLSConfig,
    VersionOverride,
)

__all__ = [
    "ConfigProvider",
    "EnvConfigProvider",
    "FileConfigProvider",
    "ImpersonationConfig",
    "ResultsConfig",
    "TLSConfig",
    "VersionOverride",
]
