import os
import mimetypes
from pathlib import PurePath
from types import MappingProxyType
from typing import Final, Iterable, Mapping

OVERRIDES: Final[dict[str, str]] = {
    ".gz": "application/gzip",
}


def system_mime_files() -> list[str]:
    return [f for f in mimetypes.knownfiles if os.path.isfile(f)]


def build_table(mime_files: Iterable[str] = ()) -> Mapping[str, str]:
    """Built-in defaults, then the given mime.types files, then OVERRIDES."""
    # Private MimeTypes instance: the process-wide mimetypes registry is left alone.
    types = mimetypes.MimeTypes(filenames=tuple(mime_files)).types_map[True]
    return MappingProxyType({**types, **OVERRIDES})


CONTENT_TYPES: Final[Mapping[str, str]] = build_table(system_mime_files())


def resolve_content_type(result_file: str | PurePath) -> str | None:
    """Content type for the final extension of `result_file`, None if unknown.

    Only the last suffix counts, so `results.tar.gz` maps to application/gzip.
    """
    suffix = PurePath(result_file).suffix
    if not suffix:
        return None
    return CONTENT_TYPES.get(suffix) or CONTENT_TYPES.get(suffix.lower())
