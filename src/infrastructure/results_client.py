# src/infrastructure/results_client.py
import ssl
import logging
from typing import AsyncIterator, BinaryIO, Callable, Protocol

import httpx
from httpx import Response
from returns.future import FutureResult, future_safe

from domain.models import TransmissionError
from domain.worker_config import WorkerConfig

CHUNK_SIZE = 64 * 1024

# Produces the stream to upload and its content type (None when unknown).
BodyFactory = Callable[[], tuple[BinaryIO, str | None]]


class Transmitter(Protocol):
    def __call__(
        self,
        url: str,
        client: httpx.AsyncClient,
        body_factory: BodyFactory,
    ) -> FutureResult[None, Exception]:
        ...


async def _chunks(stream: BinaryIO) -> AsyncIterator[bytes]:
    while chunk := stream.read(CHUNK_SIZE):
        yield chunk


def do_request(
    url: str,
    client: httpx.AsyncClient,
    body_factory: BodyFactory,
) -> FutureResult[None, Exception]:
    """PUT the stream produced by `body_factory` to `url`.

    The body factory is called lazily, once. Any non-2xx answer is a failure;
    nothing is retried.
    """

    @future_safe
    async def _() -> None:
        try:
            stream, content_type = body_factory()
        except TransmissionError:
            raise
        except Exception as e:
            raise TransmissionError("couldn't get request body") from e

        headers: dict[str, str] = {}
        if content_type:
            headers["Content-Type"] = content_type

        try:
            r: Response = await client.put(url, content=_chunks(stream), headers=headers)
        except httpx.HTTPError as e:
            raise TransmissionError("error encountered dialing master at %s" % url) from e

        if not r.is_success:
            raise TransmissionError(
                "unexpected status code %d from %s: %s" % (r.status_code, url, r.text.strip())
            )

    return _()


def build_ssl_context(config: WorkerConfig) -> ssl.SSLContext | bool:
    """SSL context for a private CA and/or client certificate, True for system defaults.

    Missing or invalid certificate files raise OSError / ssl.SSLError.
    """
    if not (config.ca_cert or config.client_cert):
        return True

    context = ssl.create_default_context(
        cafile=str(config.ca_cert) if config.ca_cert else None
    )
    if config.client_cert:
        context.load_cert_chain(
            certfile=str(config.client_cert),
            keyfile=str(config.client_key) if config.client_key else None,
        )
    return context


def build_http_client(config: WorkerConfig, logger: logging.Logger) -> httpx.AsyncClient:
    verify = build_ssl_context(config)

    logger.info(
        "MASTER_URL=%r TLS_CA=%s CLIENT_CERT=%s",
        config.master_url,
        bool(config.ca_cert),
        bool(config.client_cert),
    )
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.request_timeout_seconds, connect=10.0),
        verify=verify,
    )
