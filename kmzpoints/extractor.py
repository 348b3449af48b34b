import logging
from xml.etree import ElementTree as ET
import zipfile
import zlib

from kmzpoints.errors import (
    ArchiveOpenError,
    ExtractionError,
    FieldNotFoundError,
    MarkupParseError,
    NoMatchingMember,
)
from kmzpoints.schemas import Failure, Outcome, Record


logger = logging.getLogger(__name__)

COORDINATES_PATH = ("kml", "Document", "Placemark", "Point", "coordinates")
DESCRIPTION_PATH = ("kml", "Document", "Placemark", "description")
NAME_PATH = ("kml", "Document", "Placemark", "name")


def _local_name(tag: str) -> str:
    # KML carries a default namespace: "{http://www.opengis.net/kml/2.2}Placemark".
    return tag.rsplit("}", 1)[-1]


def value_for_path(root: ET.Element, path: tuple[str, ...]) -> str:
    """Resolve ``path`` from the document root to exactly one scalar element."""
    dotted = ".".join(path)
    if _local_name(root.tag) != path[0]:
        raise FieldNotFoundError(f"{dotted}: document root is <{_local_name(root.tag)}>")

    node = root
    for segment in path[1:]:
        matches = [child for child in node if _local_name(child.tag) == segment]
        if len(matches) != 1:
            raise FieldNotFoundError(f"{dotted}: expected one <{segment}>, found {len(matches)}")
        node = matches[0]

    if len(node):
        raise FieldNotFoundError(f"{dotted}: value is not scalar")
    return node.text or ""


def _select_member(archive: zipfile.ZipFile, document_suffix: str) -> zipfile.ZipInfo:
    for info in archive.infolist():
        if info.filename.endswith(document_suffix):
            return info
    raise NoMatchingMember(f"no member ending with {document_suffix}")


def parse_document(payload: bytes, archive_path: str = "") -> Record:
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as exc:
        raise MarkupParseError(f"invalid markup: {exc}") from exc

    return Record(
        coordinates=value_for_path(root, COORDINATES_PATH),
        description=value_for_path(root, DESCRIPTION_PATH),
        name=value_for_path(root, NAME_PATH),
        archive_path=archive_path,
    )


def read_archive(archive_path: str, document_suffix: str = ".kml") -> Record:
    """Open one KMZ archive and parse its first matching document into a Record.

    Raises a subclass of ``ExtractionError`` when the archive cannot be
    opened, holds no matching member, or the document has the wrong shape.
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            member = _select_member(archive, document_suffix)
            with archive.open(member) as handle:
                payload = handle.read()
    except (
        OSError,
        EOFError,
        RuntimeError,
        NotImplementedError,
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
    ) as exc:
        # RuntimeError: encrypted member. NotImplementedError: unsupported compression.
        raise ArchiveOpenError(f"cannot open archive: {exc}") from exc

    return parse_document(payload, archive_path=archive_path)


def extract_archive(archive_path: str, document_suffix: str = ".kml") -> Outcome:
    try:
        return read_archive(archive_path, document_suffix)
    except ExtractionError as exc:
        return Failure(archive_path=archive_path, kind=type(exc).__name__, reason=str(exc))
