from functools import partial
import logging

from kmzpoints.config import Settings
from kmzpoints.database import build_engine, build_session_factory, create_database_file, create_schema, sqlite_url
from kmzpoints.discovery import discover_archives
from kmzpoints.extractor import extract_archive
from kmzpoints.point_store import PointWriter
from kmzpoints.schemas import PipelineResult
from kmzpoints.workers import WorkerPool, collect_outcomes


logger = logging.getLogger(__name__)


class PipelineRunner:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def run(self, root_path: str | None = None) -> PipelineResult:
        root_path = root_path or self.settings.root_path

        archive_paths = discover_archives(root_path, self.settings.archive_suffix)

        pool = WorkerPool(
            self.settings.worker_count,
            extract_fn=partial(extract_archive, document_suffix=self.settings.document_suffix),
        )
        result_queue = pool.start(archive_paths)
        records, failures = collect_outcomes(result_queue, len(archive_paths))
        pool.join()

        # Everything below runs after the pool has drained; the store has a single writer.
        database_path = create_database_file(self.settings.output_dir)
        engine = build_engine(sqlite_url(database_path))
        try:
            create_schema(engine)
            session_factory = build_session_factory(engine)
            with session_factory() as db:
                writer = PointWriter(db)
                inserted, insert_errors = writer.insert_all(records, on_error=self.settings.insert_error_policy)
        finally:
            engine.dispose()

        logger.info(
            "pipeline run completed",
            extra={
                "root_path": root_path,
                "database_path": str(database_path),
                "archives": len(archive_paths),
                "extracted": len(records),
                "failed": len(failures),
                "persisted": len(inserted),
                "insert_errors": len(insert_errors),
            },
        )
        return PipelineResult(
            root_path=root_path,
            database_path=str(database_path),
            worker_count=self.settings.worker_count,
            total_archives=len(archive_paths),
            extracted_records=len(records),
            failed_archives=len(failures),
            persisted_points=len(inserted),
            failures=tuple(failures),
        )
