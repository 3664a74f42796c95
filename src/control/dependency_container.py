# src/control/dependency_container.py
from pathlib import Path
from dependency_injector import containers, providers

from infrastructure.env import Env
from infrastructure.logging import create_logger
from infrastructure.fs import FileSystem, IFileSystem
from infrastructure.results_client import build_http_client, do_request
from domain.worker_config import WorkerConfig
from application.gather_results import ResultGatherer
from control.shutdown_coordinator import ShutdownCoordinator

# ------------------------ Factory / Provider functions ------


def env_provider_func(path: str | Path) -> Env:
    return Env().load(path).unwrap()


def worker_config_func(env: Env, config_file: str | Path | None) -> WorkerConfig:
    if config_file:
        return WorkerConfig.load(Path(config_file))
    return WorkerConfig.from_env(env.vars)


def get_log_dir(root: str | Path | None) -> Path | None:
    return Path(root) if root else None


def get_log_level(env: Env) -> str:
    return str(env.get("LOG_LEVEL", "INFO")).upper()


def get_waitfile(config: WorkerConfig) -> Path:
    return config.waitfile


def get_result_url(config: WorkerConfig) -> str:
    return config.result_url


def get_grace_period(config: WorkerConfig) -> float:
    return config.graceful_shutdown_seconds


def get_poll_interval(config: WorkerConfig) -> float:
    return config.poll_interval_seconds


# ------------------------ Dependency Container ------------------------


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    # -------------------- Infrastructure --------------------

    env: providers.Singleton[Env] = providers.Singleton(
        env_provider_func,
        path=config.dotenv_path
    )

    fs: providers.Singleton[IFileSystem] = providers.Singleton(FileSystem)

    logger = providers.Singleton(
        create_logger,
        name="worker",
        log_dir=providers.Callable(get_log_dir, config.log_dir),
        logfile_size_limit_mb=config.logfile_size_limit_MB,
        level=providers.Callable(get_log_level, env),
    )

    # -------------------- Domain --------------------

    worker_config: providers.Singleton[WorkerConfig] = providers.Singleton(
        worker_config_func,
        env=env,
        config_file=config.config_file,
    )

    http_client = providers.Singleton(
        build_http_client,
        config=worker_config,
        logger=logger,
    )

    # -------------------- Control --------------------

    shutdown: providers.Factory[ShutdownCoordinator] = providers.Factory(
        ShutdownCoordinator,
        logger=logger,
    )

    # -------------------- Application --------------------

    gatherer: providers.Factory[ResultGatherer] = providers.Factory(
        ResultGatherer,
        waitfile=providers.Callable(get_waitfile, worker_config),
        url=providers.Callable(get_result_url, worker_config),
        client=http_client,
        fs=fs,
        transmit=providers.Object(do_request),
        shutdown=shutdown,
        logger=logger,
        grace_period=providers.Callable(get_grace_period, worker_config),
        poll_interval=providers.Callable(get_poll_interval, worker_config),
    )
