"""Configuration provider following Black Box Design principles."""
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol
from urllib.parse import urlsplit

import yaml

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
DEFAULT_VERSION_OVERRIDE = "v1beta1"
DEFAULT_CONFIG_PATH = "~/.config/kubectl-tekton/results.yaml"

_DISABLED = {"", "none", "off", "false"}


@dataclass
class TLSConfig:
    """TLS material for the Results endpoint."""
    ca_file: Optional[str] = None
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    insecure_skip_verify: bool = False


@dataclass
class ImpersonationConfig:
    """Identity to impersonate through the Kubernetes API proxy."""
    user: Optional[str] = None
    uid: Optional[str] = None
    groups: List[str] = field(default_factory=list)
    extra: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def enabled(self) -> bool:
        return bool(self.user or self.uid or self.groups or self.extra)


@dataclass
class VersionOverride:
    """
    Compatibility policy for the Results API migration.

    Records written by the Results watcher are typed with the v1beta1
    Tekton API even when the cluster serves a newer version. While the
    policy is enabled, resolved resource versions are replaced with
    ``version`` before a request is built.
    """
    enabled: bool = True
    version: str = DEFAULT_VERSION_OVERRIDE

    def apply(self, version: str) -> str:
        return self.version if self.enabled else version


@dataclass
class ResultsConfig:
    """Everything needed to reach a Tekton Results server."""
    host: str
    token: Optional[str] = None
    tls: TLSConfig = field(default_factory=TLSConfig)
    impersonation: ImpersonationConfig = field(default_factory=ImpersonationConfig)
    timeout: float = DEFAULT_TIMEOUT
    version_override: VersionOverride = field(default_factory=VersionOverride)

    def validate(self) -> "ResultsConfig":
        """
        Check the configuration before any connection is attempted.

        Returns:
            self, for chaining

        Raises:
            ConfigurationError: If the endpoint or credentials are malformed
        """
        if not self.host:
            raise ConfigurationError("results host is not configured")
        parts = urlsplit(self.host)
        if parts.scheme not in ("http", "https"):
            raise ConfigurationError(f"results host must be an http(s) URL, got {self.host!r}")
        if not parts.netloc:
            raise ConfigurationError(f"results host has no network location: {self.host!r}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if bool(self.tls.cert_file) != bool(self.tls.key_file):
            raise ConfigurationError("client certificate and key must be configured together")
        return self

    def redacted(self) -> Dict[str, Any]:
        """Return a printable view with the token masked."""
        return {
            "host": self.host,
            "token": "REDACTED" if self.token else None,
            "timeout": self.timeout,
            "tls": {
                "caFile": self.tls.ca_file,
                "certFile": self.tls.cert_file,
                "keyFile": self.tls.key_file,
                "insecureSkipVerify": self.tls.insecure_skip_verify,
            },
            "impersonate": {
                "user": self.impersonation.user,
                "uid": self.impersonation.uid,
                "groups": list(self.impersonation.groups),
                "extra": dict(self.impersonation.extra),
            },
            "apiVersionOverride": (
                self.version_override.version if self.version_override.enabled else None
            ),
        }


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_results_config(self) -> ResultsConfig:
        """Get the validated Results client configuration."""
        ...


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def _parse_timeout(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"timeout must be a number of seconds, got {value!r}") from e


def _parse_override(value: Optional[str]) -> VersionOverride:
    if value is None or str(value).strip().lower() in _DISABLED:
        return VersionOverride(enabled=False)
    return VersionOverride(enabled=True, version=str(value).strip())


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get_results_config(self) -> ResultsConfig:
        """Get Results configuration from TEKTON_RESULTS_* variables."""
        return self.overlay(ResultsConfig(host="")).validate()

    def overlay(self, base: ResultsConfig) -> ResultsConfig:
        """Apply the variables that are set on top of ``base``."""
        env = self.environ
        cfg = replace(
            base,
            tls=replace(base.tls),
            impersonation=replace(base.impersonation),
            version_override=replace(base.version_override),
        )

        if "TEKTON_RESULTS_HOST" in env:
            cfg.host = env["TEKTON_RESULTS_HOST"].strip()
        if "TEKTON_RESULTS_TOKEN" in env:
            cfg.token = env["TEKTON_RESULTS_TOKEN"] or None
        if "TEKTON_RESULTS_TIMEOUT" in env:
            cfg.timeout = _parse_timeout(env["TEKTON_RESULTS_TIMEOUT"])
        if "TEKTON_RESULTS_API_VERSION_OVERRIDE" in env:
            cfg.version_override = _parse_override(env["TEKTON_RESULTS_API_VERSION_OVERRIDE"])

        # TLS
        if "TEKTON_RESULTS_CA_FILE" in env:
            cfg.tls.ca_file = env["TEKTON_RESULTS_CA_FILE"] or None
        if "TEKTON_RESULTS_CERT_FILE" in env:
            cfg.tls.cert_file = env["TEKTON_RESULTS_CERT_FILE"] or None
        if "TEKTON_RESULTS_KEY_FILE" in env:
            cfg.tls.key_file = env["TEKTON_RESULTS_KEY_FILE"] or None
        if "TEKTON_RESULTS_INSECURE_SKIP_VERIFY" in env:
            cfg.tls.insecure_skip_verify = _parse_bool(env["TEKTON_RESULTS_INSECURE_SKIP_VERIFY"])

        # Impersonation
        if "TEKTON_RESULTS_IMPERSONATE_USER" in env:
            cfg.impersonation.user = env["TEKTON_RESULTS_IMPERSONATE_USER"] or None
        if "TEKTON_RESULTS_IMPERSONATE_UID" in env:
            cfg.impersonation.uid = env["TEKTON_RESULTS_IMPERSONATE_UID"] or None
        if "TEKTON_RESULTS_IMPERSONATE_GROUPS" in env:
            cfg.impersonation.groups = _split(env["TEKTON_RESULTS_IMPERSONATE_GROUPS"])

        return cfg


class FileConfigProvider:
    """
    YAML file configuration provider.

    The file is read, never written. Environment variables override the
    values found in the file. A missing file is treated as empty.

    Example file:
        host: https://tekton-results.example.com
        token: <bearer token>
        timeout: 30
        tls:
          caFile: /etc/ssl/results-ca.pem
        impersonate:
          user: jane
          groups: [developers]
        apiVersionOverride: v1beta1
    """

    def __init__(
        self,
        path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        env = os.environ if environ is None else environ
        self.path = Path(path or env.get("TEKTON_RESULTS_CONFIG", DEFAULT_CONFIG_PATH)).expanduser()
        self.env_provider = EnvConfigProvider(env)

    def get_results_config(self) -> ResultsConfig:
        """Get Results configuration from the file, then the environment."""
        base = self._from_mapping(self._load())
        return self.env_provider.overlay(base).validate()

    def _load(self) -> Dict[str, Any]:
        if not self.path.is_file():
            logger.debug(f"No config file at {self.path}")
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"cannot read config file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"config file {self.path} must contain a mapping")
        logger.debug(f"Loaded config file {self.path}")
        return data

    @staticmethod
    def _from_mapping(data: Dict[str, Any]) -> ResultsConfig:
        tls = data.get("tls") or {}
        imp = data.get("impersonate") or {}
        override = (
            _parse_override(data["apiVersionOverride"])
            if "apiVersionOverride" in data
            else VersionOverride()
        )
        return ResultsConfig(
            host=str(data.get("host") or "").strip(),
            token=data.get("token") or None,
            timeout=_parse_timeout(data.get("timeout", DEFAULT_TIMEOUT)),
            tls=TLSConfig(
                ca_file=tls.get("caFile"),
                cert_file=tls.get("certFile"),
                key_file=tls.get("keyFile"),
                insecure_skip_verify=bool(tls.get("insecureSkipVerify", False)),
            ),
            impersonation=ImpersonationConfig(
                user=imp.get("user"),
                uid=imp.get("uid"),
                groups=list(imp.get("groups") or []),
                extra={k: list(v) for k, v in (imp.get("extra") or {}).items()},
            ),
            version_override=override,
        )
