import abc
import dataclasses
import mimetypes
import re

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_utf8_re = re.compile(r"^(?:text/|application/(?:javascript|json))", re.RegexFlag.IGNORECASE)


@dataclasses.dataclass(frozen=True, slots=True)
class ContentType:
    type: str
    charset: str | None = None

    def __str__(self) -> str:
        if self.charset is None:
            return self.type
        return f"{self.type}; charset={self.charset}"


class ContentTypeResolver(abc.ABC):
    __slots__ = ()

    @abc.abstractmethod
    def resolve(self, path: str) -> ContentType: ...


class MimetypesContentTypeResolver(ContentTypeResolver):
    """Guesses a content type by a file extension, textual types are assumed to be UTF-8 encoded"""

    __slots__ = ("__mime_types", "__default_type")

    def __init__(self, *, mime_types: mimetypes.MimeTypes | None = None, default_type: str = DEFAULT_CONTENT_TYPE):
        self.__mime_types = mime_types or mimetypes.MimeTypes()
        self.__default_type = default_type

    def resolve(self, path: str) -> ContentType:
        content_type, _ = self.__mime_types.guess_type(path, strict=False)
        content_type = content_type or self.__default_type
        return ContentType(content_type, "UTF-8" if _utf8_re.match(content_type) else None)
