"""
Configuration Utilities

Composes the Hydra configuration and turns it into validated pipeline
settings. The sink is resolved once here into either a file export or a
remote ingestion configuration.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Union

from hydra import compose, initialize
from omegaconf import DictConfig

from utils.extract_utils import build_auth_headers, build_base_url


project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

REMOTE_SINK_OPTIONS = (
    "tenant_id",
    "client_id",
    "client_secret",
    "dce_endpoint",
    "dcr_immutable_id",
    "stream_name",
)


class ConfigError(ValueError):
    """Raised when the supplied configuration cannot describe a pipeline run."""


@dataclass
class SourceConfig:
    domain: str
    api_key: str = field(repr=False)
    lookback_minutes: int = 0
    page_size: int = 100
    page_delay: float = 0.1
    rate_limit_delay: float = 10
    max_rate_limit_retries: int = 10
    timeout: Optional[float] = None

    @property
    def base_url(self):
        return build_base_url(self.domain)

    @property
    def headers(self):
        return build_auth_headers(self.api_key)


@dataclass
class FileExportConfig:
    output_path: str

    mode = "file"


@dataclass
class RemoteIngestionConfig:
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)
    dce_endpoint: str
    dcr_immutable_id: str
    stream_name: str
    batch_size: int = 200
    api_version: str = "2023-01-01"
    authority: str = "https://login.microsoftonline.com"
    scope: str = "https://monitor.azure.com//.default"
    timeout: Optional[float] = None

    mode = "remote"


SinkConfig = Union[FileExportConfig, RemoteIngestionConfig]


@dataclass
class PipelineConfig:
    source: SourceConfig
    sink: SinkConfig


def _is_set(value):
    return value is not None and str(value).strip() != ""


def build_source_config(cfg: DictConfig) -> SourceConfig:
    """Builds the source settings from the 'source' and 'extract' sections."""
    source = cfg.source
    extract = cfg.extract

    missing = [name for name in ("domain", "api_key") if not _is_set(source.get(name))]
    if missing:
        raise ConfigError(f"Missing source option(s): {', '.join('source.' + name for name in missing)}")

    try:
        lookback_minutes = int(source.get("lookback_minutes") or 0)
    except (TypeError, ValueError):
        raise ConfigError(f"source.lookback_minutes must be an integer, got {source.get('lookback_minutes')!r}")
    if lookback_minutes < 0:
        raise ConfigError("source.lookback_minutes must be 0 (full history) or a positive number of minutes")

    return SourceConfig(
        domain=str(source.domain),
        api_key=str(source.api_key),
        lookback_minutes=lookback_minutes,
        page_size=int(extract.page_size),
        page_delay=float(extract.page_delay_seconds),
        rate_limit_delay=float(extract.rate_limit_delay_seconds),
        max_rate_limit_retries=int(extract.max_rate_limit_retries),
        timeout=extract.get("timeout_seconds"),
    )


def build_sink_config(cfg: DictConfig) -> SinkConfig:
    """
    Resolves the sink from the supplied options.

    A file export needs only 'sink.output_path'. A remote ingestion needs every
    option in REMOTE_SINK_OPTIONS. Supplying both, neither, or a partial remote
    set raises a single ConfigError.
    """
    sink = cfg.sink
    load = cfg.load
    auth = cfg.auth

    has_output_path = _is_set(sink.get("output_path"))
    supplied_remote = [name for name in REMOTE_SINK_OPTIONS if _is_set(sink.get(name))]
    missing_remote = [name for name in REMOTE_SINK_OPTIONS if name not in supplied_remote]

    if has_output_path and supplied_remote:
        raise ConfigError(
            "Choose exactly one sink: 'sink.output_path' cannot be combined with remote ingestion "
            f"options ({', '.join('sink.' + name for name in supplied_remote)})"
        )

    if has_output_path:
        return FileExportConfig(output_path=str(sink.output_path))

    if not supplied_remote:
        raise ConfigError(
            "No sink configured: set 'sink.output_path' for a file export, or all of "
            f"{', '.join('sink.' + name for name in REMOTE_SINK_OPTIONS)} for remote ingestion"
        )

    if missing_remote:
        raise ConfigError(
            "Incomplete remote ingestion configuration, missing: "
            f"{', '.join('sink.' + name for name in missing_remote)}"
        )

    batch_size = int(load.batch_size)
    if batch_size <= 0:
        raise ConfigError("load.batch_size must be positive")

    return RemoteIngestionConfig(
        tenant_id=str(sink.tenant_id),
        client_id=str(sink.client_id),
        client_secret=str(sink.client_secret),
        dce_endpoint=str(sink.dce_endpoint),
        dcr_immutable_id=str(sink.dcr_immutable_id),
        stream_name=str(sink.stream_name),
        batch_size=batch_size,
        api_version=str(load.api_version),
        authority=str(auth.authority),
        scope=str(auth.scope),
        timeout=load.get("timeout_seconds"),
    )


def build_pipeline_config(cfg: DictConfig) -> PipelineConfig:
    return PipelineConfig(source=build_source_config(cfg), sink=build_sink_config(cfg))


def load_config(overrides=None) -> DictConfig:
    """Composes config/hydra/config.yaml with command-line style overrides."""
    config_path = os.path.relpath(os.path.join(project_root, "config", "hydra"), os.path.dirname(__file__))
    with initialize(config_path=config_path, version_base=None):
        return compose(config_name="config", overrides=list(overrides or []))
