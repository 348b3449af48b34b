from collections.abc import Callable
from pathlib import Path
import zipfile

import pytest

from kmzpoints.config import Settings


KML_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <name>{name}</name>
      <description>{description}</description>
      <Point>
        <coordinates>{coordinates}</coordinates>
      </Point>
    </Placemark>
  </Document>
</kml>
"""


def _render_kml(name: str, description: str, coordinates: str) -> str:
    return KML_TEMPLATE.format(name=name, description=description, coordinates=coordinates)


@pytest.fixture()
def render_kml() -> Callable[[str, str, str], str]:
    return _render_kml


@pytest.fixture()
def make_kmz() -> Callable[..., Path]:
    def _make_kmz(path: Path, members: dict[str, str]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for member_name, content in members.items():
                archive.writestr(member_name, content)
        return path

    return _make_kmz


@pytest.fixture()
def make_point_kmz(make_kmz) -> Callable[..., Path]:
    def _make_point_kmz(path: Path, name: str, description: str, coordinates: str) -> Path:
        return make_kmz(path, {"doc.kml": _render_kml(name, description, coordinates)})

    return _make_point_kmz


@pytest.fixture()
def temp_workspace(tmp_path: Path) -> Path:
    (tmp_path / "archives").mkdir(parents=True, exist_ok=True)
    (tmp_path / "outputs").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def test_settings(temp_workspace: Path) -> Settings:
    return Settings(
        app_name="kmzpoints",
        log_level="INFO",
        root_path=str(temp_workspace / "archives"),
        output_dir=str(temp_workspace / "outputs"),
        worker_count=2,
        archive_suffix=".kmz",
        document_suffix=".kml",
        insert_error_policy="fail",
    )
