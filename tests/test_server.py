import threading
import xml.etree.ElementTree as ET
from http.server import ThreadingHTTPServer
from unittest import mock
from urllib.error import HTTPError
from urllib.request import urlopen

import pymysql
import pytest

from ymlfeed.config import Config, DBConfig
from ymlfeed.entity import Offer
from ymlfeed.render import XML_HEADER, VersionTracker
from ymlfeed.server import main, make_handler, run


def _config(port="9999"):
    password = "password"
    return Config(database=DBConfig("localhost", "3306", "root", password, "root"), port=port)


class FakeRepository:
    def __init__(self, fail=False):
        self.fail = fail

    def fetch_classes(self):
        return [Offer(id=10, name="Jazz")]

    def fetch_passes(self):
        if self.fail:
            raise RuntimeError("boom")
        return [Offer(id=1, name="Trial")]


def _get(url):
    """Return (status, content type, body) for ``url``, error responses included."""
    try:
        with urlopen(url) as response:
            return response.status, response.headers["Content-Type"], response.read()
    except HTTPError as error:
        return error.code, error.headers["Content-Type"], error.read()


@pytest.fixture
def serve():
    servers = []

    def start(repository, config):
        handler = make_handler(repository, config, VersionTracker())
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_address[1]}"

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def test_feed_served_at_configured_path(serve):
    config = _config()
    base = serve(FakeRepository(), config)
    status, content_type, body = _get(base + config.yandex_path)
    assert status == 200
    assert content_type == "application/xml; charset=utf-8"
    assert body.startswith(XML_HEADER.encode("utf-8"))
    assert [o.get("id") for o in ET.fromstring(body).iter("offer")] == ["10", "1"]


def test_query_links_update_config(serve):
    config = _config()
    base = serve(FakeRepository(), config)
    status, _, _ = _get(base + config.yandex_path + "?classlink=https://example.com/classes")
    assert status == 200
    assert config.class_default_link == "https://example.com/classes"


def test_unknown_path_is_not_found(serve):
    base = serve(FakeRepository(), _config())
    status, _, body = _get(base + "/other")
    assert status == 404
    assert body == b"404 page not found\n"


def test_fetch_failure_is_server_error(serve):
    config = _config()
    base = serve(FakeRepository(fail=True), config)
    status, _, body = _get(base + config.yandex_path)
    assert status == 500
    assert body == b"fetchPasses error: boom\n"


def test_run_rejects_bad_port(capsys):
    with pytest.raises(SystemExit) as info:
        run(_config(port="not-a-port"), FakeRepository())
    assert info.value.code == 1
    assert capsys.readouterr().err.startswith("ListenAndServe error")


def test_main_exits_when_database_unreachable(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME"):
        monkeypatch.delenv(name, raising=False)
    failure = pymysql.err.OperationalError(2003, "unreachable")
    with mock.patch.object(pymysql, "connect", side_effect=failure):
        with pytest.raises(SystemExit) as info:
            main([])
    assert info.value.code == 1