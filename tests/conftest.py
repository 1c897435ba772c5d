import json
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from utils.config_utils import FileExportConfig, RemoteIngestionConfig, SourceConfig


def make_response(status_code=200, json_body=None, headers=None, text=""):
    """Builds a real requests.Response so raise_for_status/json behave as in production."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response.url = "https://test.local/"
    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
    else:
        response._content = text.encode("utf-8")
    response.headers.update(headers or {})
    return response


def page_number(url):
    return int(parse_qs(urlparse(url).query)["page"][0])


def fake_helpdesk(resources, page_size=100):
    """requests.get replacement serving paginated listings keyed by resource name."""
    def get(url, headers=None, timeout=None):
        path = urlparse(url).path
        for name, items in resources.items():
            if path.endswith(f"/api/v2/{name}"):
                page = page_number(url)
                chunk = items[(page - 1) * page_size:page * page_size]
                return make_response(200, {name: chunk})
        return make_response(404, text="not found")
    return get


@pytest.fixture
def source():
    return SourceConfig(
        domain="acme.freshservice.com",
        api_key="secret-key",
        lookback_minutes=60,
        page_delay=0,
        rate_limit_delay=10,
        max_rate_limit_retries=3,
        timeout=5,
    )


@pytest.fixture
def remote_sink():
    return RemoteIngestionConfig(
        tenant_id="tenant-1",
        client_id="client-1",
        client_secret="shh",
        dce_endpoint="https://dce.westeurope-1.ingest.monitor.azure.com",
        dcr_immutable_id="dcr-abc123",
        stream_name="Custom-HelpdeskTickets_CL",
    )


@pytest.fixture
def file_sink(tmp_path):
    return FileExportConfig(output_path=str(tmp_path / "out" / "tickets.json"))


@pytest.fixture
def agents():
    return [
        {"id": 11, "first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"},
        {"id": 12, "first_name": "Grace", "last_name": None},
        {"id": 13, "last_name": "Hopper"},
    ]


@pytest.fixture
def groups():
    return [
        {"id": 21, "name": "Service Desk"},
        {"id": 22, "name": "Network Ops"},
    ]


@pytest.fixture
def ticket():
    return {
        "id": 1001,
        "subject": "VPN down",
        "status": 2,
        "responder_id": 11,
        "group_id": 22,
        "custom_fields": {"site": "Berlin", "impact_level": 3},
        "requester": {"id": 5, "first_name": "Linus", "last_name": "T", "email": "linus@example.com"},
        "tags": ["vpn", "network"],
        "created_at": "2026-10-19T08:00:00Z",
        "updated_at": "2026-10-19T09:30:00Z",
    }
