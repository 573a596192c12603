import pytest
import requests
from tenacity import wait_none

from avrorecord import ContainerDecoder, ContainerEncoder, DecoderConfig, HttpSource, iter_file
from avrorecord.sources import HttpFetchError


class FakeResponse:
    def __init__(self, status_code, body=b""):
        self.status_code = status_code
        self.body = body
        self.closed = False

    def iter_content(self, chunk_size):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0
        self.closed = False

    def get(self, url, **kwargs):
        self.calls += 1
        assert kwargs["stream"] is True
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(HttpSource.open.retry, "wait", wait_none())


def test_iter_file_chunks(tmp_path, user_schema, make_user):
    path = tmp_path / "users.avro"
    users = [make_user("Ann", 1), make_user("Bob", 2)]
    path.write_bytes(ContainerEncoder(user_schema).encode(users))
    chunks = list(iter_file(path, DecoderConfig(chunk_size=5)))
    assert all(len(c) <= 5 for c in chunks)
    assert list(ContainerDecoder(iter_file(path, DecoderConfig(chunk_size=5)))) == users


def test_http_source_streams_body(user_schema, make_user):
    users = [make_user("Ann", 1)]
    response = FakeResponse(200, ContainerEncoder(user_schema).encode(users))
    source = HttpSource("http://example.invalid/users.avro", session=FakeSession([response]), config=DecoderConfig(chunk_size=4))
    assert list(ContainerDecoder(source)) == users
    assert response.closed is True


def test_http_source_retries_failed_open(user_schema, make_user):
    users = [make_user("Ann", 1)]
    session = FakeSession([
        FakeResponse(503),
        requests.ConnectionError("reset"),
        FakeResponse(200, ContainerEncoder(user_schema).encode(users)),
    ])
    source = HttpSource("http://example.invalid/users.avro", session=session)
    assert list(ContainerDecoder(source)) == users
    assert session.calls == 3


def test_http_source_gives_up(user_schema):
    session = FakeSession([FakeResponse(500) for _ in range(5)])
    source = HttpSource("http://example.invalid/users.avro", session=session)
    with pytest.raises(HttpFetchError):
        list(source)
    assert session.calls == 5


def test_http_source_closes_session_it_created(monkeypatch, user_schema, make_user):
    users = [make_user("Ann", 1)]
    created = []

    def make_session():
        session = FakeSession([FakeResponse(200, ContainerEncoder(user_schema).encode(users))])
        created.append(session)
        return session

    monkeypatch.setattr(requests, "Session", make_session)
    source = HttpSource("http://example.invalid/users.avro")
    assert list(ContainerDecoder(source)) == users
    assert len(created) == 1
    assert created[0].closed is True


def test_http_source_leaves_caller_session_open(user_schema, make_user):
    session = FakeSession([FakeResponse(200, ContainerEncoder(user_schema).encode([make_user("Ann", 1)]))])
    list(HttpSource("http://example.invalid/users.avro", session=session))
    assert session.closed is False
