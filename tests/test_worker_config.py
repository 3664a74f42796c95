"""Tests for worker configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from domain.worker_config import WorkerConfig
from infrastructure.env import Env


class TestWorkerConfig:
    def test_from_env_global_plugin(self):
        config = WorkerConfig.from_env(
            {
                "MASTER_URL": "https://aggregator:8080/",
                "RESULTS_DIR": "/tmp/results",
                "RESULT_TYPE": "e2e",
                "GRACEFUL_SHUTDOWN_SECONDS": 5,
            }
        )

        assert config.waitfile == Path("/tmp/results/done")
        assert config.result_url == "https://aggregator:8080/api/v1/results/global/e2e"
        assert config.graceful_shutdown_seconds == 5
        assert config.poll_interval_seconds == 1.0

    def test_from_env_node_plugin(self):
        config = WorkerConfig.from_env(
            {
                "MASTER_URL": "http://aggregator",
                "RESULTS_DIR": "/tmp/results",
                "RESULT_TYPE": "systemd-logs",
                "NODE_NAME": 42,
            }
        )

        assert config.node_name == "42"
        assert config.result_url == "http://aggregator/api/v1/results/by-node/42/systemd-logs"

    def test_defaults_graceful_shutdown_to_a_minute(self):
        config = WorkerConfig(master_url="http://m", results_dir=Path("/r"), result_type="e2e")
        assert config.graceful_shutdown_seconds == 60.0

    def test_missing_master_url_is_rejected(self):
        with pytest.raises(ValidationError):
            WorkerConfig.from_env({"RESULTS_DIR": "/tmp/results", "RESULT_TYPE": "e2e"})

    def test_non_positive_poll_interval_is_rejected(self):
        with pytest.raises(ValidationError):
            WorkerConfig(
                master_url="http://m", results_dir=Path("/r"), result_type="e2e",
                poll_interval_seconds=0,
            )

    def test_client_key_without_cert_is_rejected(self):
        with pytest.raises(ValidationError, match="client_cert"):
            WorkerConfig.from_env(
                {
                    "MASTER_URL": "https://aggregator",
                    "RESULTS_DIR": "/tmp/results",
                    "RESULT_TYPE": "e2e",
                    "CLIENT_KEY": "/etc/worker/tls.key",
                }
            )

    def test_is_frozen(self):
        config = WorkerConfig(master_url="http://m", results_dir=Path("/r"), result_type="e2e")
        with pytest.raises(ValidationError):
            config.result_type = "other"  # type: ignore[misc]

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "worker.yaml"
        path.write_text(
            "master_url: http://aggregator\n"
            "results_dir: /tmp/results\n"
            "result_type: e2e\n"
            "graceful_shutdown_seconds: 2\n"
        )

        config = WorkerConfig.load(path)

        assert config.results_dir == Path("/tmp/results")
        assert config.graceful_shutdown_seconds == 2.0


class TestEnv:
    def test_parses_dotenv_and_environment(self, tmp_path, monkeypatch):
        dotenv = tmp_path / ".env"
        dotenv.write_text("RESULT_TYPE=e2e\nGRACEFUL_SHUTDOWN_SECONDS=2.5\nRESULTS_DIR=/from/dotenv\n")
        monkeypatch.setenv("RESULTS_DIR", "/from/environ")
        monkeypatch.setenv("WORKER_DEBUG", "true")

        env = Env().load(dotenv).unwrap()

        assert env.get("RESULT_TYPE") == "e2e"
        assert env.get("GRACEFUL_SHUTDOWN_SECONDS") == 2.5
        assert env.get("RESULTS_DIR") == "/from/environ"
        assert env.get("WORKER_DEBUG") is True

    def test_missing_dotenv_is_fine(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MASTER_URL", "http://aggregator")

        env = Env().load(tmp_path / "absent.env").unwrap()

        assert env.get("MASTER_URL") == "http://aggregator"
        assert env.get("NOT_THERE", 7) == 7
