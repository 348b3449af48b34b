from dataclasses import dataclass
import os

from dotenv import load_dotenv


load_dotenv()

INSERT_ERROR_POLICIES = ("fail", "skip")


@dataclass(frozen=True)
class Settings:
    app_name: str
    log_level: str
    root_path: str
    output_dir: str
    worker_count: int
    archive_suffix: str
    document_suffix: str
    insert_error_policy: str


def default_worker_count() -> int:
    return os.cpu_count() or 1


def get_settings() -> Settings:
    worker_count = int(os.getenv("WORKER_COUNT", str(default_worker_count())))
    if worker_count < 1:
        raise ValueError(f"WORKER_COUNT must be at least 1, got {worker_count}")

    insert_error_policy = os.getenv("INSERT_ERROR_POLICY", "fail").strip().lower()
    if insert_error_policy not in INSERT_ERROR_POLICIES:
        raise ValueError(f"INSERT_ERROR_POLICY must be one of {INSERT_ERROR_POLICIES}, got {insert_error_policy!r}")

    return Settings(
        app_name=os.getenv("APP_NAME", "kmzpoints"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        root_path=os.getenv("ROOT_PATH", "."),
        output_dir=os.getenv("OUTPUT_DIR", "."),
        worker_count=worker_count,
        archive_suffix=os.getenv("ARCHIVE_SUFFIX", ".kmz"),
        document_suffix=os.getenv("DOCUMENT_SUFFIX", ".kml"),
        insert_error_policy=insert_error_policy,
    )
