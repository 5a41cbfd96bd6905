import socket

import pytest

from openai_mock import cli


@pytest.fixture
def quiet_env(monkeypatch):
    """Keep the test's log capture in place and ignore MOCK_* variables from the shell."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    for name in ("MOCK_PORT", "MOCK_HOST", "MOCK_MIN_LATENCY", "MOCK_MAX_LATENCY", "MOCK_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def served(quiet_env, monkeypatch):
    """Capture what would be handed to uvicorn instead of binding a socket."""
    calls = {}

    def fake_run(app, host, port, **kwargs):
        calls.update(app=app, host=host, port=port)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    return calls


class TestParser:

    def test_durations_parsed_to_seconds(self, served):
        args = cli.build_parser().parse_args(["--min-latency", "100ms", "--max-latency", "1.5s"])

        assert args.min_latency == pytest.approx(0.1)
        assert args.max_latency == pytest.approx(1.5)

    def test_unset_flags_are_none(self, served):
        args = cli.build_parser().parse_args([])
        assert args.port is None and args.min_latency is None and args.config is None

    def test_invalid_duration_is_usage_error(self, served):
        with pytest.raises(SystemExit) as excinfo:
            cli.build_parser().parse_args(["--min-latency", "soon"])
        assert excinfo.value.code == 2

    def test_environment_defaults(self, served, monkeypatch):
        monkeypatch.setenv("MOCK_PORT", "9100")
        monkeypatch.setenv("MOCK_MIN_LATENCY", "200ms")
        args = cli.build_parser().parse_args([])

        assert args.port == 9100
        assert args.min_latency == pytest.approx(0.2)


class TestMain:

    def test_serves_with_defaults(self, served):
        cli.main([])

        assert served["port"] == 8080
        assert served["host"] == "0.0.0.0"
        assert served["app"].state.config.chat_models == ("gpt-3.5-turbo", "gpt-4")

    def test_flags_override_config_file(self, served, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"port": 9090, "min_latency": "1s", "max_latency": "2s"}')
        cli.main(["--config", str(path), "--port", "7070"])

        config = served["app"].state.config
        assert served["port"] == 7070
        assert config.min_latency == 1.0
        assert config.max_latency == 2.0

    def test_bind_failure_exits_non_zero(self, quiet_env, caplog):
        """A port already in use makes the real uvicorn startup fail."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as occupied:
            occupied.bind(("127.0.0.1", 0))
            occupied.listen(1)
            port = occupied.getsockname()[1]

            with pytest.raises(SystemExit) as excinfo:
                cli.main(["--host", "127.0.0.1", "--port", str(port)])

        assert excinfo.value.code == 1
        assert any(
            record.levelname == "CRITICAL" and "Failed to start server" in record.getMessage()
            for record in caplog.records
        )
