from collections.abc import Callable, Sequence
import logging
import queue
import threading

from kmzpoints.extractor import extract_archive
from kmzpoints.schemas import Failure, Outcome, Record


logger = logging.getLogger(__name__)

ExtractFn = Callable[[str], Outcome]

# Placed once per worker after the last job; a worker exits when it pulls one.
_STOP = object()


class WorkerPool:
    """Fixed pool of threads pulling archive paths from a shared job queue."""

    def __init__(self, worker_count: int, extract_fn: ExtractFn = extract_archive) -> None:
        if worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {worker_count}")
        self.worker_count = worker_count
        self.extract_fn = extract_fn
        self._threads: list[threading.Thread] = []

    def start(self, jobs: Sequence[str]) -> queue.Queue:
        job_queue: queue.Queue = queue.Queue(maxsize=len(jobs) + self.worker_count)
        result_queue: queue.Queue = queue.Queue(maxsize=max(len(jobs), 1))

        for job in jobs:
            job_queue.put(job)
        for _ in range(self.worker_count):
            job_queue.put(_STOP)

        self._threads = [
            threading.Thread(
                target=self._work,
                args=(worker_id, job_queue, result_queue),
                name=f"kmz-worker-{worker_id}",
                daemon=True,
            )
            for worker_id in range(1, self.worker_count + 1)
        ]
        for thread in self._threads:
            thread.start()
        return result_queue

    def join(self) -> None:
        for thread in self._threads:
            thread.join()
        self._threads = []

    def run(self, jobs: Sequence[str]) -> list[Outcome]:
        result_queue = self.start(jobs)
        outcomes = [result_queue.get() for _ in range(len(jobs))]
        self.join()
        return outcomes

    def _work(self, worker_id: int, job_queue: queue.Queue, result_queue: queue.Queue) -> None:
        while True:
            job = job_queue.get()
            if job is _STOP:
                return

            logger.info("worker %s picked up %s", worker_id, job, extra={"worker": worker_id, "archive_path": job})
            try:
                outcome = self.extract_fn(job)
            except Exception as exc:
                # Every job must yield one outcome or the collector never finishes.
                logger.exception("worker %s crashed on %s", worker_id, job, extra={"archive_path": job})
                outcome = Failure(archive_path=job, kind="UnexpectedError", reason=str(exc))
            result_queue.put(outcome)
            logger.info("worker %s processed %s", worker_id, job, extra={"worker": worker_id, "archive_path": job})


def collect_outcomes(result_queue: queue.Queue, expected_count: int) -> tuple[list[Record], list[Failure]]:
    """Drain exactly ``expected_count`` outcomes, split into records and failures."""
    if expected_count < 0:
        raise ValueError(f"expected_count must not be negative, got {expected_count}")

    records: list[Record] = []
    failures: list[Failure] = []
    for _ in range(expected_count):
        outcome = result_queue.get()
        if isinstance(outcome, Failure):
            logger.warning(
                "archive skipped: %s (%s: %s)",
                outcome.archive_path,
                outcome.kind,
                outcome.reason,
                extra={"archive_path": outcome.archive_path, "error_code": outcome.kind},
            )
            failures.append(outcome)
        else:
            records.append(outcome)
    return records, failures
