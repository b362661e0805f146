import asyncio
import dataclasses
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests
from urllib3.exceptions import InsecureRequestWarning

from weather_client import APIClient
from weather_client.descriptor import JSONBody, MultipartForm, QueryParameters, URLEncodedBody
from weather_client.endpoint import Endpoint, HTTPMethod
from weather_client.exceptions import BadRequestError, DecodingError, InvalidURLError
from weather_client.multipart import MultipartBody

BASE_URL = "https://api.example.com"


def make_endpoint(path="/v1/items", *, method=HTTPMethod.GET, body=None, base_url=BASE_URL):
    kwargs = {"body": body} if body is not None else {}
    return Endpoint(method=method, base_url=base_url, path=path, **kwargs)


class StatuslessSession:
    """Session whose responses never carry a status code."""

    def request(self, *args, **kwargs):  # pragma: no cover - helper
        response = requests.Response()
        response._content = b"{}"
        return response

    def close(self):  # pragma: no cover - helper
        pass


class CookieHandler(BaseHTTPRequestHandler):
    """Hands out a session cookie on /login and records every Cookie header."""

    def do_GET(self):
        self.server.received_cookies.append(self.headers.get("Cookie"))
        body = b"{}"
        self.send_response(200)
        if self.path == "/login":
            self.send_header("Set-Cookie", "sid=abc; Path=/")
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):  # pragma: no cover - silence test output
        pass


@pytest.fixture
def cookie_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), CookieHandler)
    server.received_cookies = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@dataclasses.dataclass
class Item:
    id: int
    name: str


@pytest.mark.asyncio
async def test_fetch_bytes_returns_body_unchanged(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", content=b"\x00raw\xffbytes")

    content = await client.fetch_bytes(make_endpoint())

    assert content == b"\x00raw\xffbytes"


@pytest.mark.asyncio
async def test_fetch_bytes_accepts_any_2xx(client, requests_mock):
    requests_mock.post(f"{BASE_URL}/v1/items", status_code=204)

    assert await client.fetch_bytes(make_endpoint(method=HTTPMethod.POST)) == b""


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [301, 400, 404, 500])
async def test_non_2xx_raises_bad_request(client, requests_mock, status_code):
    requests_mock.get(f"{BASE_URL}/v1/items", status_code=status_code, text="nope")

    with pytest.raises(BadRequestError) as excinfo:
        await client.fetch_bytes(make_endpoint())

    assert excinfo.value.status_code == status_code
    assert excinfo.value.details == "nope"


@pytest.mark.asyncio
async def test_missing_status_is_treated_as_400():
    client = APIClient(session=StatuslessSession())

    with pytest.raises(BadRequestError) as excinfo:
        await client.fetch_bytes(make_endpoint())

    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_transport_errors_propagate_unchanged(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", exc=requests.exceptions.ConnectTimeout)

    with pytest.raises(requests.exceptions.ConnectTimeout):
        await client.fetch_bytes(make_endpoint())


@pytest.mark.asyncio
async def test_build_errors_propagate_before_sending(client, requests_mock):
    with pytest.raises(InvalidURLError):
        await client.fetch_bytes(make_endpoint(base_url=" "))

    assert not requests_mock.called


@pytest.mark.asyncio
async def test_fetch_dict_returns_object(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", text='{"a":1}')

    assert await client.fetch_dict(make_endpoint()) == {"a": 1}


@pytest.mark.asyncio
async def test_fetch_dict_rejects_non_object(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", text="[1,2,3]")

    with pytest.raises(BadRequestError):
        await client.fetch_dict(make_endpoint())


@pytest.mark.asyncio
async def test_fetch_dict_rejects_invalid_json(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", text="<html>")

    with pytest.raises(DecodingError):
        await client.fetch_dict(make_endpoint())


@pytest.mark.asyncio
async def test_fetch_model_decodes_dataclass(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", json={"id": 7, "name": "seven"})

    item = await client.fetch_model(make_endpoint(), Item)

    assert item == Item(id=7, name="seven")


@pytest.mark.asyncio
async def test_fetch_model_decodes_generic_shapes(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", json=[{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])

    items = await client.fetch_model(make_endpoint(), list[Item])

    assert [item.id for item in items] == [1, 2]


@pytest.mark.asyncio
async def test_fetch_model_mismatch_raises_decoding_error(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", json={"id": "not-a-number"})

    with pytest.raises(DecodingError) as excinfo:
        await client.fetch_model(make_endpoint(), Item)

    assert not isinstance(excinfo.value, BadRequestError)


@pytest.mark.asyncio
async def test_query_string_reaches_the_wire(client, requests_mock):
    matcher = requests_mock.get(f"{BASE_URL}/v1/items", json={})

    await client.fetch_dict(make_endpoint(body=QueryParameters({"q": "a+b", "n": 2})))

    assert matcher.last_request.url == f"{BASE_URL}/v1/items?q=a%2Bb&n=2"
    assert matcher.last_request.qs == {"q": ["a+b"], "n": ["2"]}


@pytest.mark.asyncio
async def test_json_body_reaches_the_wire(client, requests_mock):
    matcher = requests_mock.post(f"{BASE_URL}/v1/items", json={"ok": True})

    await client.fetch_dict(make_endpoint(method=HTTPMethod.POST, body=JSONBody({"name": "x"})))

    assert json.loads(matcher.last_request.body) == {"name": "x"}


@pytest.mark.asyncio
async def test_form_body_reaches_the_wire(client, requests_mock):
    matcher = requests_mock.put(f"{BASE_URL}/v1/items", json={})

    await client.fetch_dict(make_endpoint(method=HTTPMethod.PUT, body=URLEncodedBody({"a": "1", "b": "2"})))

    assert matcher.last_request.body == b"a=1&b=2"
    assert matcher.last_request.headers["Content-Type"] == "application/x-www-form-urlencoded"


@pytest.mark.asyncio
async def test_multipart_body_reaches_the_wire(client, requests_mock):
    matcher = requests_mock.post(f"{BASE_URL}/v1/upload", json={})
    form = MultipartBody(boundary="X")
    form.add_file("file", "a.png", "image/png", b"\x89PNG")

    await client.fetch_dict(make_endpoint("/v1/upload", method=HTTPMethod.POST, body=MultipartForm(form)))

    assert matcher.last_request.headers["Content-Type"] == "multipart/form-data; boundary=X"
    assert matcher.last_request.body == form.finalize()


@pytest.mark.asyncio
async def test_concurrent_requests_receive_their_own_responses(client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/a", json={"name": "a"})
    requests_mock.get(f"{BASE_URL}/v1/b", json={"name": "b"})

    first, second = await asyncio.gather(
        client.fetch_dict(make_endpoint("/v1/a")),
        client.fetch_dict(make_endpoint("/v1/b")),
    )

    assert first == {"name": "a"}
    assert second == {"name": "b"}


@pytest.mark.asyncio
async def test_request_logging_omits_query(caplog, client, requests_mock):
    requests_mock.get(f"{BASE_URL}/v1/items", json={})

    with caplog.at_level("INFO", logger="weather_client.client"):
        await client.fetch_dict(make_endpoint(body=QueryParameters({"key": "secret"})))

    assert f"Weather API request GET {BASE_URL}/v1/items" in caplog.text
    assert "secret" not in caplog.text


def test_prepare_applies_default_headers():
    client = APIClient(default_headers={"User-Agent": "weather-tests"})

    request = client.prepare(make_endpoint())

    assert dict(request.headers) == {"User-Agent": "weather-tests"}


def test_disables_insecure_warning_when_verify_disabled(monkeypatch):
    captured: list[object] = []

    def fake_disable(warning):  # pragma: no cover - helper
        captured.append(warning)

    monkeypatch.setattr(
        "weather_client.client.urllib3.disable_warnings",
        fake_disable,
    )

    APIClient(verify_ssl=False)

    assert captured and captured[0] is InsecureRequestWarning


@pytest.mark.asyncio
async def test_cookies_are_not_carried_between_calls(cookie_server):
    session = requests.Session()
    session.trust_env = False
    client = APIClient(session=session)
    base_url = f"http://127.0.0.1:{cookie_server.server_port}"

    await client.fetch_dict(make_endpoint("/login", base_url=base_url))
    await client.fetch_dict(make_endpoint("/items", base_url=base_url))

    assert cookie_server.received_cookies == [None, None]
    assert len(session.cookies) == 0


def test_preloaded_session_cookies_are_dropped():
    session = requests.Session()
    session.cookies.set("sid", "stale", domain="api.example.com")

    APIClient(session=session)

    assert len(session.cookies) == 0


@pytest.mark.asyncio
async def test_cancelled_call_leaves_client_usable(client, requests_mock):
    started = threading.Event()
    release = threading.Event()

    def slow_body(request, context):
        started.set()
        release.wait(timeout=5)
        return {"late": True}

    requests_mock.get(f"{BASE_URL}/v1/slow", json=slow_body)
    requests_mock.get(f"{BASE_URL}/v1/items", json={"ok": True})

    task = asyncio.create_task(client.fetch_bytes(make_endpoint("/v1/slow")))
    for _ in range(500):
        if started.is_set():
            break
        await asyncio.sleep(0.01)
    assert started.is_set()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    release.set()

    assert await client.fetch_dict(make_endpoint()) == {"ok": True}
