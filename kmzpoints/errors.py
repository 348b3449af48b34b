class KmzPointsError(Exception):
    """Base class for pipeline failures."""

    error_code = "KMZPOINTS_ERROR"


class FilesystemError(KmzPointsError):
    """Raised when archive discovery cannot walk the tree."""

    error_code = "FILESYSTEM_ERROR"


class ExtractionError(KmzPointsError):
    """Raised for a single archive whose content cannot be turned into a record."""

    error_code = "EXTRACTION_ERROR"


class ArchiveOpenError(ExtractionError):
    error_code = "ARCHIVE_OPEN_ERROR"


class NoMatchingMember(ExtractionError):
    error_code = "NO_MATCHING_MEMBER"


class MarkupParseError(ExtractionError):
    error_code = "MARKUP_PARSE_ERROR"


class FieldNotFoundError(ExtractionError):
    error_code = "FIELD_NOT_FOUND"


class PersistenceError(KmzPointsError):
    """Raised when the point store cannot be created or written."""

    error_code = "PERSISTENCE_ERROR"
