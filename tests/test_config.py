import pytest
from omegaconf import OmegaConf

from utils.config_utils import (
    REMOTE_SINK_OPTIONS,
    ConfigError,
    FileExportConfig,
    RemoteIngestionConfig,
    build_pipeline_config,
    load_config,
)


ENV_VARS = (
    "HELPDESK_DOMAIN", "HELPDESK_API_KEY", "LOOKBACK_MINUTES", "OUTPUT_PATH",
    "AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET",
    "DCE_ENDPOINT", "DCR_IMMUTABLE_ID", "DCR_STREAM_NAME",
)

REMOTE = {
    "tenant_id": "t",
    "client_id": "c",
    "client_secret": "s",
    "dce_endpoint": "https://dce.example.com",
    "dcr_immutable_id": "dcr-1",
    "stream_name": "Custom-T_CL",
}


def make_cfg(sink=None, source=None):
    base = {
        "source": {"domain": "acme.freshservice.com", "api_key": "k", "lookback_minutes": 60},
        "extract": {
            "page_size": 100,
            "page_delay_seconds": 0.1,
            "rate_limit_delay_seconds": 10,
            "max_rate_limit_retries": 10,
            "timeout_seconds": None,
        },
        "sink": {"output_path": None, **{name: None for name in REMOTE_SINK_OPTIONS}},
        "load": {"batch_size": 200, "api_version": "2023-01-01", "timeout_seconds": None},
        "auth": {
            "authority": "https://login.microsoftonline.com",
            "scope": "https://monitor.azure.com//.default",
        },
    }
    base["sink"].update(sink or {})
    base["source"].update(source or {})
    return OmegaConf.create(base)


def test_file_sink():
    config = build_pipeline_config(make_cfg(sink={"output_path": "out/tickets.csv"}))

    assert isinstance(config.sink, FileExportConfig)
    assert config.sink.mode == "file"
    assert config.source.lookback_minutes == 60
    assert config.source.base_url == "https://acme.freshservice.com/api/v2"


def test_remote_sink():
    config = build_pipeline_config(make_cfg(sink=REMOTE))

    assert isinstance(config.sink, RemoteIngestionConfig)
    assert config.sink.mode == "remote"
    assert config.sink.batch_size == 200
    assert "client_secret" not in repr(config.sink)


def test_both_sinks_rejected():
    with pytest.raises(ConfigError, match="exactly one sink"):
        build_pipeline_config(make_cfg(sink={"output_path": "x.json", **REMOTE}))


def test_no_sink_rejected():
    with pytest.raises(ConfigError, match="No sink configured"):
        build_pipeline_config(make_cfg())


def test_partial_remote_lists_every_missing_option():
    partial = {key: value for key, value in REMOTE.items() if key not in ("client_secret", "stream_name")}

    with pytest.raises(ConfigError) as excinfo:
        build_pipeline_config(make_cfg(sink=partial))

    message = str(excinfo.value)
    assert "sink.client_secret" in message
    assert "sink.stream_name" in message


def test_blank_values_count_as_missing():
    with pytest.raises(ConfigError, match="No sink configured"):
        build_pipeline_config(make_cfg(sink={"output_path": "  ", "tenant_id": ""}))


def test_missing_source_credentials():
    with pytest.raises(ConfigError, match="source.api_key"):
        build_pipeline_config(make_cfg(sink={"output_path": "x.json"}, source={"api_key": None}))


def test_invalid_lookback():
    with pytest.raises(ConfigError, match="lookback_minutes"):
        build_pipeline_config(make_cfg(sink={"output_path": "x.json"}, source={"lookback_minutes": "soon"}))


def test_load_config_applies_overrides(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HELPDESK_API_KEY", "from-env")

    cfg = load_config([
        "source.domain=acme.freshservice.com",
        "source.lookback_minutes=15",
        "sink.output_path=out/tickets.json",
    ])
    config = build_pipeline_config(cfg)

    assert config.source.api_key == "from-env"
    assert config.source.lookback_minutes == 15
    assert config.sink == FileExportConfig(output_path="out/tickets.json")


def test_requests_have_no_timeout_unless_configured(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    remote = [
        "sink.tenant_id=t",
        "sink.client_id=c",
        "sink.client_secret=s",
        "sink.dce_endpoint='https://dce.example.com'",
        "sink.dcr_immutable_id=dcr-1",
        "sink.stream_name=Custom-Tickets_CL",
    ]
    base = ["source.domain=acme.freshservice.com", "source.api_key=k"] + remote

    default = build_pipeline_config(load_config(base))
    assert default.source.timeout is None
    assert default.sink.timeout is None

    tuned = build_pipeline_config(load_config(base + ["extract.timeout_seconds=5", "load.timeout_seconds=7"]))
    assert tuned.source.timeout == 5
    assert tuned.sink.timeout == 7
