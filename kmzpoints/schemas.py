from dataclasses import dataclass


@dataclass(frozen=True)
class Record:
    coordinates: str
    description: str
    name: str
    archive_path: str = ""


@dataclass(frozen=True)
class Failure:
    archive_path: str
    kind: str
    reason: str


Outcome = Record | Failure


@dataclass(frozen=True)
class PipelineResult:
    root_path: str
    database_path: str
    worker_count: int
    total_archives: int
    extracted_records: int
    failed_archives: int
    persisted_points: int
    failures: tuple[Failure, ...] = ()
