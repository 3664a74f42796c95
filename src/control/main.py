# src/control/main.py
import os
import sys
import logging
from typing import Any
from pathlib import Path
from returns.result import Result, safe

from .app_controller import AppController
from .dependency_container import Container


def main() -> None:
    config: dict[str, Any] = {
        "dotenv_path": Path(os.environ.get("WORKER_DOTENV", ".env")),
        "config_file": os.environ.get("WORKER_CONFIG_FILE"),
        "log_dir": os.environ.get("WORKER_LOG_DIR"),
        "logfile_size_limit_MB": 10,
    }

    exit_code: int = run_app(config).alt(
        lambda err: print(f"Worker failed: {err}", file=sys.stderr)
    ).value_or(1)
    sys.exit(exit_code)


@safe
def build_controller(config: dict[str, Any]) -> AppController:
    container = Container()
    container.config.from_dict(config)

    logger: logging.Logger = container.logger()
    # Resolve configuration and TLS material eagerly so a bad environment fails before polling starts.
    try:
        container.worker_config()
        container.http_client()
    except Exception:
        logger.exception("Invalid worker configuration")
        raise

    return AppController(container=container, logger=logger)


def run_app(config: dict[str, Any]) -> Result[int, Exception]:
    return build_controller(config).map(lambda controller: controller.run())


if __name__ == "__main__":
    main()
