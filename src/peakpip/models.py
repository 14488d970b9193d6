from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from .errors import DecodeError


def _text(value: Any) -> str:
    """Index fields are frequently null; normalize them to strings."""
    return str(value) if value is not None else ""


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if not isinstance(value, list):
        raise DecodeError(f"expected a list, got {type(value).__name__}")
    return tuple(str(item) for item in value)


def _keywords(value: Any) -> Tuple[str, ...]:
    # The JSON API serves keywords as one string, comma or space separated
    if not value:
        return ()
    if isinstance(value, list):
        return tuple(str(k).strip() for k in value if str(k).strip())
    sep = "," if "," in value else None
    return tuple(k.strip() for k in str(value).split(sep) if k.strip())


@dataclass(frozen=True)
class ReleaseFile:
    filename: str
    url: str
    packagetype: str
    size: int
    sha256: str
    upload_time: str
    python_version: str

    @classmethod
    def from_json(cls, entry: Dict[str, Any]) -> "ReleaseFile":
        if not isinstance(entry, dict):
            raise DecodeError("release file entry is not an object")
        digests = entry.get("digests") or {}
        try:
            size = int(entry.get("size") or 0)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"invalid size for {entry.get('filename')}: {e}") from e
        return cls(
            filename=_text(entry.get("filename")),
            url=_text(entry.get("url")),
            packagetype=_text(entry.get("packagetype")),
            size=size,
            sha256=_text(digests.get("sha256")),
            upload_time=_text(entry.get("upload_time")),
            python_version=_text(entry.get("python_version")),
        )


@dataclass(frozen=True)
class PackageRecord:
    """
    Package metadata as served by the index JSON API.

    Built once per lookup from the ``info`` and ``urls`` members of the
    response; dependency and classifier order is kept exactly as served.
    """

    name: str
    version: str
    summary: str = ""
    author: str = ""
    homepage: str = ""
    license: str = ""
    dependencies: Tuple[str, ...] = ()
    classifiers: Tuple[str, ...] = ()
    description: str = ""
    keywords: Tuple[str, ...] = ()
    project_urls: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    files: Tuple[ReleaseFile, ...] = ()

    @classmethod
    def from_json(cls, payload: Any) -> "PackageRecord":
        if not isinstance(payload, dict):
            raise DecodeError("index response is not a JSON object")
        info = payload.get("info")
        if not isinstance(info, dict):
            raise DecodeError("index response has no 'info' object")

        name = _text(info.get("name")).strip()
        if not name:
            raise DecodeError("index response has an empty package name")

        raw_urls = info.get("project_urls") or {}
        if not isinstance(raw_urls, dict):
            raise DecodeError("'project_urls' is not an object")
        project_urls = {str(k): _text(v) for k, v in raw_urls.items()}

        homepage = _text(info.get("home_page"))
        if not homepage:
            homepage = project_urls.get("Homepage") or project_urls.get("homepage") or ""

        files = payload.get("urls") or []
        if not isinstance(files, list):
            raise DecodeError("'urls' is not a list")

        return cls(
            name=name,
            version=_text(info.get("version")),
            summary=_text(info.get("summary")),
            author=_text(info.get("author")),
            homepage=homepage,
            license=_text(info.get("license")),
            dependencies=_str_tuple(info.get("requires_dist")),
            classifiers=_str_tuple(info.get("classifiers")),
            description=_text(info.get("description")),
            keywords=_keywords(info.get("keywords")),
            project_urls=MappingProxyType(project_urls),
            files=tuple(ReleaseFile.from_json(f) for f in files),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.version}) - {self.summary}"
