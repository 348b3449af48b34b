from collections.abc import Iterable
import logging
import math
import uuid

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kmzpoints.db_models import Point
from kmzpoints.errors import PersistenceError
from kmzpoints.schemas import Record


logger = logging.getLogger(__name__)


def parse_coordinates(coordinates: str) -> tuple[float, float]:
    """Split a KML ``lon,lat[,alt]`` string into ``(longitude, latitude)``."""
    fields = coordinates.split(",")
    if len(fields) < 2:
        raise PersistenceError(f"coordinates need longitude and latitude: {coordinates!r}")
    if "_" in fields[0] or "_" in fields[1]:
        raise PersistenceError(f"coordinates are not numeric: {coordinates!r}")

    try:
        longitude = float(fields[0])
        latitude = float(fields[1])
    except ValueError as exc:
        raise PersistenceError(f"coordinates are not numeric: {coordinates!r}") from exc

    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        raise PersistenceError(f"coordinates are not finite: {coordinates!r}")
    return longitude, latitude


class PointWriter:
    def __init__(self, db: Session) -> None:
        self.db = db
        # One statement reused for every row in the run.
        self.statement = insert(Point)

    def insert(self, record: Record) -> str:
        longitude, latitude = parse_coordinates(record.coordinates)
        point_id = str(uuid.uuid4())
        try:
            self.db.execute(
                self.statement,
                {
                    "id": point_id,
                    "name": record.name,
                    "description": record.description,
                    "latitude": latitude,
                    "longitude": longitude,
                },
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"cannot insert point {record.name!r}: {exc}") from exc
        return point_id

    def insert_all(
        self,
        records: Iterable[Record],
        *,
        on_error: str = "fail",
    ) -> tuple[list[str], list[tuple[Record, PersistenceError]]]:
        if on_error not in ("fail", "skip"):
            raise ValueError(f"unknown insert error policy: {on_error!r}")

        inserted: list[str] = []
        errors: list[tuple[Record, PersistenceError]] = []
        for record in records:
            try:
                inserted.append(self.insert(record))
            except PersistenceError as exc:
                if on_error == "fail":
                    raise
                logger.warning(
                    "point not persisted: %s (%s)",
                    record.archive_path,
                    exc,
                    extra={"archive_path": record.archive_path, "error_code": exc.error_code},
                )
                errors.append((record, exc))
        return inserted, errors
