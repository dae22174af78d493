import pytest
from typer.testing import CliRunner
from werkzeug import Request, Response

from rtail.cli import app


class TestCLIURL:
    """Test the CLI functionality with remote URLs."""

    @pytest.fixture
    def runner(self):
        """CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def content(self):
        return b"".join(b"entry %04d\n" % i for i in range(300))

    @pytest.mark.parametrize("mode", [[], ["--sync"]])
    def test_remote_tail(self, runner, httpserver, content, mode):
        """The last N bytes of a remote file are printed."""
        def serve(request: Request) -> Response:
            response = Response(content, content_type="text/plain")
            return response.make_conditional(request, accept_ranges=True, complete_length=len(content))

        httpserver.expect_request("/app.log").respond_with_handler(serve)
        result = runner.invoke(app, [*mode, "-c", "22", httpserver.url_for("/app.log")])

        assert result.exit_code == 0
        assert result.stdout_bytes == b"entry 0298\nentry 0299\n"

    def test_credentials_from_environment(self, runner, httpserver, content):
        """RTAIL_USER / RTAIL_PASSWORD feed basic auth."""
        httpserver.expect_request(
            "/secret.log", headers={"Authorization": "Basic YWxpY2U6czNjcmV0"},
        ).respond_with_data(content)
        result = runner.invoke(
            app, ["--sync", "-c", "+0", httpserver.url_for("/secret.log")],
            env={"RTAIL_USER": "alice", "RTAIL_PASSWORD": "s3cret"},
        )

        assert result.exit_code == 0
        assert result.stdout_bytes == content

    def test_remote_error(self, runner, httpserver):
        """A 404 exits with 1 and prints the status line."""
        httpserver.expect_request("/gone.log").respond_with_data("", status=404)
        result = runner.invoke(app, ["--sync", "-c", "+0", httpserver.url_for("/gone.log")])

        assert result.exit_code == 1
        assert "404" in result.output

    def test_dump_headers(self, runner, httpserver, content):
        httpserver.expect_request("/app.log").respond_with_data(content)
        result = runner.invoke(app, ["--dump-headers", "-c", "+0", httpserver.url_for("/app.log")])

        assert result.exit_code == 0
        assert "-- REQUEST: GET" in result.output
