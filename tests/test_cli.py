import json
import httpx
import pytest
from ipsonar import API_KEY_HEADER, API_SERVER
from ipsonar.cli import main, run
from ipsonar.config import parse_args, query_params

def test_parse_args_env_defaults(monkeypatch):
    monkeypatch.setenv("IPSONAR_BASE_URL", "https://geo.internal")
    monkeypatch.setenv("IPSONAR_API_KEY", "k")
    args = parse_args(["--fields", "ip,city_name", "lookup", "8.8.8.8"])
    assert args.base_url == "https://geo.internal"
    assert args.api_key == "k"
    assert args.command == "lookup" and args.ip == "8.8.8.8"
    assert query_params(args) == {"fields": "ip,city_name"}

def test_parse_args_defaults(monkeypatch):
    monkeypatch.delenv("IPSONAR_BASE_URL", raising=False)
    monkeypatch.delenv("IPSONAR_API_KEY", raising=False)
    args = parse_args(["batch", "1.1.1.1", "9.9.9.9"])
    assert args.base_url == API_SERVER
    assert args.api_key is None
    assert args.ips == ["1.1.1.1", "9.9.9.9"]
    assert query_params(args) == {}

@pytest.mark.asyncio
async def test_run_lookup_prints_json(capsys):
    def handler(request):
        assert request.headers[API_KEY_HEADER] == "secret"
        assert request.url.params["locale_code"] == "en"
        return httpx.Response(200, json={"ip": "8.8.8.8", "country_code": "US"})

    args = parse_args(["--base-url", "https://api.example.com", "--api-key", "secret", "--locale-code", "en", "lookup", "8.8.8.8"])
    code = await run(args, transport=httpx.MockTransport(handler))
    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"ip": "8.8.8.8", "country_code": "US"}

@pytest.mark.asyncio
async def test_run_batch_prints_envelope(capsys):
    def handler(request):
        ips = json.loads(request.content)["data"]
        return httpx.Response(200, json={"data": [{"ip": ip} for ip in ips]})

    args = parse_args(["--base-url", "https://api.example.com", "batch", "1.1.1.1", "9.9.9.9"])
    assert await run(args, transport=httpx.MockTransport(handler)) == 0
    assert json.loads(capsys.readouterr().out) == {"data": [{"ip": "1.1.1.1"}, {"ip": "9.9.9.9"}]}

@pytest.mark.asyncio
async def test_run_reports_api_error(capsys):
    transport = httpx.MockTransport(lambda r: httpx.Response(429, json={"message": "Too Many Requests"}))
    args = parse_args(["--base-url", "https://api.example.com", "my"])
    assert await run(args, transport=transport) == 1
    assert "429 Too Many Requests: Too Many Requests" in capsys.readouterr().err

def test_main_configuration_error(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--base-url", "nope", "my"])
    assert exc_info.value.code == 2
    assert "Configuration error" in capsys.readouterr().err

@pytest.mark.asyncio
async def test_run_falls_back_to_raw_body_without_message(capsys):
    transport = httpx.MockTransport(lambda r: httpx.Response(401, json={"error": "bad key"}))
    args = parse_args(["--base-url", "https://api.example.com", "lookup", "8.8.8.8"])
    assert await run(args, transport=transport) == 1
    assert '401 Unauthorized: {"error":' in capsys.readouterr().err
