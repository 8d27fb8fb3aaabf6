"""HTTP service that publishes the catalogue feed."""

import argparse
import logging
import sys
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pymysql

from .config import load_config
from .render import VersionTracker, render_feed
from .repository import Repository, connect

logger = logging.getLogger(__name__)


def make_handler(repository, config, tracker):
    """Return a request handler class serving the feed at the configured path."""
    route = config.yandex_path

    class FeedHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            url = urlsplit(self.path)
            matches = url.path.startswith(route) if route.endswith("/") else url.path == route
            if not matches:
                self._reply(404, b"404 page not found\n")
                return
            params = parse_qs(url.query, keep_blank_values=True)
            try:
                body = render_feed(
                    repository, config, tracker,
                    params.get("passlink", [""])[0], params.get("classlink", [""])[0],
                )
            except RuntimeError as exc:
                self._reply(500, f"{exc}\n".encode("utf-8"))
                return
            self._reply(200, body, "application/xml; charset=utf-8")

        do_POST = do_GET

        def _reply(self, status: int, body: bytes, content_type: str = "text/plain; charset=utf-8") -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            if status != 200:
                self.send_header("X-Content-Type-Options", "nosniff")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            logger.info("%s - %s", self.address_string(), format % args)

    return FeedHandler


def run(config, repository) -> None:
    """Serve the feed on the configured port until interrupted."""
    handler = make_handler(repository, config, VersionTracker())
    logger.info("Слушаем порт :%s", config.port)
    try:
        server = ThreadingHTTPServer(("", int(config.port)), handler)
    except (OSError, ValueError, OverflowError) as exc:
        print(f"ListenAndServe error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    with server:
        server.serve_forever()


def main(argv=None) -> None:
    """Load settings, connect to the database and serve the feed."""
    argparse.ArgumentParser(prog="ymlfeed", description="Serve the catalogue as a YML feed.").parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    config = load_config()
    try:
        connection = connect(config.database)
    except (pymysql.MySQLError, ValueError) as exc:
        logger.error("Ошибка подключения к БД: %s", exc)
        raise SystemExit(1) from exc

    try:
        run(config, Repository(connection, config))
    finally:
        connection.close()