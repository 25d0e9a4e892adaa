from typing import Any

from .client import Client
from .content_type import ContentTypeResolver, MimetypesContentTypeResolver
from .dispatcher import Dispatcher
from .file import DEFAULT_CHUNK_SIZE, FileTransport
from .filesystem import FileSystem
from .transport import Transport

MISSING: Any = object()


def setup(
    *,
    network_transport: Transport,
    file_transport: Transport = MISSING,
    file_system: FileSystem | None = None,
    content_type_resolver: ContentTypeResolver | None = MISSING,
    max_ancestor_probes: int = 2,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    network_errors_code: int = 502,
) -> Client:
    if file_transport is not MISSING and (
        file_system is not None
        or content_type_resolver is not MISSING
        or max_ancestor_probes != 2
        or chunk_size != DEFAULT_CHUNK_SIZE
    ):
        raise ValueError("file_transport cannot be combined with the options of the default file transport")

    if file_transport is MISSING:
        file_transport = FileTransport(
            file_system=file_system,
            content_type_resolver=(
                MimetypesContentTypeResolver() if content_type_resolver is MISSING else content_type_resolver
            ),
            max_ancestor_probes=max_ancestor_probes,
            chunk_size=chunk_size,
        )

    return Client(
        dispatcher=Dispatcher(
            file_transport=file_transport,
            network_transport=network_transport,
            network_errors_code=network_errors_code,
        )
    )
