"""Tests for the push pipeline: end-to-end sessions against a mock registry."""

import io
import json
import tempfile
import uuid
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from schemapush.errors import FatalCredentialError, FatalDiscoveryError
from schemapush.push import Reporter, process
from schemapush.registry import uploader
from schemapush.registry.models import Result, ServerMessage, Status

API_KEY = uuid.UUID("2b1f4a5e-5c1d-4e8a-9d0e-6f7a8b9c0d1e")
READ = uuid.UUID("22222222-2222-2222-2222-222222222222")
WRITE = uuid.UUID("33333333-3333-3333-3333-333333333333")
ROOT = "http://registry.test"


def _write_schema(root: Path, name: str) -> Path:
    """Write a valid self-describing schema named *name* under *root*."""
    schema = {
        "self": {"vendor": "com.acme", "name": name, "format": "jsonschema", "version": "1-0-0"},
        "type": "object",
    }
    path = root / "com.acme" / name / "jsonschema" / "1-0-0"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(schema))
    return path


class FakeRegistry:
    """Mock registry answering per schema name.

    ``answers`` maps a schema name to ``(status_code, body)``; anything
    not listed is created.
    """

    def __init__(self, answers: dict | None = None, keygen_status: int = 201):
        self.answers = answers or {}
        self.keygen_status = keygen_status
        self.uploads: list[httpx.Request] = []
        self.revoked: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/auth/keygen" and request.method == "POST":
            return httpx.Response(self.keygen_status, json={"read": str(READ), "write": str(WRITE)})
        if path == "/api/auth/keygen" and request.method == "DELETE":
            self.revoked.append(request.url.params["key"])
            return httpx.Response(200, json={"message": "Keys deleted"})

        self.uploads.append(request)
        name = path.split("/")[-3]
        answer = self.answers.get(name, (201, json.dumps({"message": f"Schema {name} created", "location": path})))
        if isinstance(answer, Exception):
            raise answer
        status_code, body = answer
        return httpx.Response(status_code, text=body)


def _run(input_dir, registry: FakeRegistry, legacy: bool = False, is_public: bool = False):
    buffer = io.StringIO()
    reporter = Reporter(Console(file=buffer, soft_wrap=True, color_system=None))
    with httpx.Client(transport=httpx.MockTransport(registry)) as client:
        code = process(
            input_dir, ROOT, API_KEY, is_public, legacy, client=client, reporter=reporter
        )
    return code, buffer.getvalue().splitlines()


def test_all_created():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        for name in ("a", "b", "c"):
            _write_schema(root, name)

        code, lines = _run(root, FakeRegistry())

    assert code == 0
    assert len([line for line in lines if line.startswith("SUCCESS: ")]) == 3
    assert lines[-2] == "TOTAL: 3 Schemas successfully uploaded (3 created; 0 updated)"
    assert lines[-1] == "TOTAL: 0 failed Schema uploads"


def test_mixed_results_with_malformed_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "old")
        _write_schema(root, "new")
        (root / "broken.json").write_text("{not json")
        registry = FakeRegistry({"old": (200, '{"message":"Schema old updated","location":"/x"}')})

        code, lines = _run(root, registry)

    assert code == 1
    assert len(registry.uploads) == 2
    assert len(lines) == 5
    assert "SUCCESS: Schema old updated at /x" in lines
    assert any(line.startswith("FAILURE: Cannot parse ") and "broken.json" in line for line in lines)
    assert lines[-2] == "TOTAL: 2 Schemas successfully uploaded (1 created; 1 updated)"
    assert lines[-1] == "TOTAL: 1 failed Schema uploads"


def test_server_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "only")

        code, lines = _run(root, FakeRegistry({"only": (500, "boom")}))

    assert code == 1
    assert lines == [
        "FAILURE: boom",
        "TOTAL: 0 Schemas successfully uploaded (0 created; 0 updated)",
        "TOTAL: 1 failed Schema uploads",
    ]


def test_unknown_status_prints_warning():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "odd")

        code, lines = _run(root, FakeRegistry({"odd": (200, "OK")}))

    assert code == 1
    assert lines[0] == "FAILURE: OK"
    assert lines[-1] == "WARNING: 1 unknown statuses"


def test_transport_error_does_not_stop_session():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "flaky")
        _write_schema(root, "fine")
        registry = FakeRegistry({"flaky": httpx.ConnectError("connection reset")})

        code, lines = _run(root, registry)

    assert code == 1
    assert "FAILURE: connection reset" in lines
    assert lines[-2] == "TOTAL: 1 Schemas successfully uploaded (1 created; 0 updated)"


def test_markup_in_server_message_is_printed_verbatim():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "x")

        _, lines = _run(root, FakeRegistry({"x": (400, "[red]bad[/red] request")}))

    assert lines[0] == "FAILURE: [red]bad[/red] request"


def test_empty_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        code, lines = _run(Path(tmpdir), FakeRegistry())

    assert code == 0
    assert lines == [
        "TOTAL: 0 Schemas successfully uploaded (0 created; 0 updated)",
        "TOTAL: 0 failed Schema uploads",
    ]


def test_visibility_and_key_sent():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "a")
        registry = FakeRegistry()

        _run(root, registry, is_public=True)

    request = registry.uploads[0]
    assert request.url.params["isPublic"] == "true"
    assert request.headers["Authorization"] == f"Bearer {API_KEY}"


# --- Legacy mode ---


def test_legacy_uploads_with_write_key_and_revokes():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "a")
        _write_schema(root, "b")
        registry = FakeRegistry()

        code, _ = _run(root, registry, legacy=True)

    assert code == 0
    assert all(r.headers["apikey"] == str(WRITE) for r in registry.uploads)
    assert sorted(registry.revoked) == sorted([str(READ), str(WRITE)])


def test_legacy_revokes_once_when_session_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "a")
        _write_schema(root, "b")
        registry = FakeRegistry({"a": RuntimeError("registry client crashed"), "b": RuntimeError("crashed")})

        with pytest.raises(RuntimeError):
            _run(root, registry, legacy=True)

    assert sorted(registry.revoked) == sorted([str(READ), str(WRITE)])


def test_legacy_revokes_once_with_failed_uploads():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "a")
        (root / "bad.json").write_text("[]")
        registry = FakeRegistry({"a": (500, "boom")})

        code, _ = _run(root, registry, legacy=True)

    assert code == 1
    assert len(registry.revoked) == 2


def test_legacy_keygen_failure_aborts_before_uploads():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "a")
        registry = FakeRegistry(keygen_status=403)

        with pytest.raises(FatalCredentialError):
            _run(root, registry, legacy=True)

    assert registry.uploads == []
    assert registry.revoked == []


def test_missing_directory_aborts_before_network():
    registry = FakeRegistry()
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FatalDiscoveryError):
            _run(Path(tmpdir) / "nope", registry, legacy=True)

    assert registry.uploads == []
    assert registry.revoked == []


def test_non_json_number_does_not_stop_session():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "a.json").write_text(
            '{"self":{"vendor":"com.acme","name":"a","format":"jsonschema","version":"1-0-0"},'
            '"type":"number","maximum":NaN}'
        )
        _write_schema(root, "b")
        registry = FakeRegistry()

        code, lines = _run(root, registry)

    assert code == 1
    assert len(registry.uploads) == 1
    assert any(line.startswith("FAILURE: Cannot parse ") and "a.json" in line for line in lines)
    assert lines[-2] == "TOTAL: 1 Schemas successfully uploaded (1 created; 0 updated)"
    assert lines[-1] == "TOTAL: 1 failed Schema uploads"


def test_reporter_prints_raw_body_unchanged():
    buffer = io.StringIO()
    reporter = Reporter(Console(file=buffer, soft_wrap=True, color_system=None))

    reporter.report(Result(message="a\tb\rc", status=Status.FAILED))
    reporter.report(Result(message=ServerMessage(message="Schema\tx updated"), status=Status.UPDATED))

    assert buffer.getvalue() == "FAILURE: a\tb\rc\nSUCCESS: Schema\tx updated\n"


def test_legacy_revokes_once_when_request_building_fails(monkeypatch):
    real_to_httpx = uploader.to_httpx

    def to_httpx(request):
        if request.content["self"]["name"] == "a":
            raise ValueError("cannot encode schema body")
        return real_to_httpx(request)

    monkeypatch.setattr(uploader, "to_httpx", to_httpx)

    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_schema(root, "a")
        registry = FakeRegistry()

        with pytest.raises(ValueError):
            _run(root, registry, legacy=True)

    assert registry.uploads == []
    assert sorted(registry.revoked) == sorted([str(READ), str(WRITE)])
