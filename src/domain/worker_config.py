from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.models import (
    DEFAULT_GRACEFUL_SHUTDOWN_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DONE_FILE_NAME,
)

# env var -> field
ENV_KEYS: dict[str, str] = {
    "MASTER_URL": "master_url",
    "RESULTS_DIR": "results_dir",
    "RESULT_TYPE": "result_type",
    "NODE_NAME": "node_name",
    "GRACEFUL_SHUTDOWN_SECONDS": "graceful_shutdown_seconds",
    "POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "REQUEST_TIMEOUT_SECONDS": "request_timeout_seconds",
    "CA_CERT": "ca_cert",
    "CLIENT_CERT": "client_cert",
    "CLIENT_KEY": "client_key",
}


class WorkerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    master_url: str
    results_dir: Path
    result_type: str
    node_name: str | None = None
    graceful_shutdown_seconds: float = Field(default=DEFAULT_GRACEFUL_SHUTDOWN_SECONDS, ge=0)
    poll_interval_seconds: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, gt=0)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    ca_cert: Path | None = None
    client_cert: Path | None = None
    client_key: Path | None = None

    @model_validator(mode="after")
    def check_client_key(self) -> "WorkerConfig":
        if self.client_key and not self.client_cert:
            raise ValueError("client_key is set but client_cert is not")
        return self

    @property
    def waitfile(self) -> Path:
        return self.results_dir / DONE_FILE_NAME

    @property
    def result_url(self) -> str:
        """Aggregator endpoint: per-node when a node name is set, global otherwise."""
        base = self.master_url.strip().rstrip("/")
        if self.node_name:
            return f"{base}/api/v1/results/by-node/{self.node_name}/{self.result_type}"
        return f"{base}/api/v1/results/global/{self.result_type}"

    @staticmethod
    def from_env(env_vars: Mapping[str, Any]) -> "WorkerConfig":
        data = {
            field: env_vars[key]
            for key, field in ENV_KEYS.items()
            if env_vars.get(key) not in (None, "")
        }
        # Env parses numeric-looking values, names must stay strings.
        for field in ("master_url", "result_type", "node_name"):
            if field in data:
                data[field] = str(data[field])
        return WorkerConfig.model_validate(data)

    @staticmethod
    def load(path: Path) -> "WorkerConfig":
        data = yaml.safe_load(path.read_text()) or {}
        return WorkerConfig.model_validate(data)
