"""
Tests for the plot_station_calendar script.
"""

import io
import logging
import zipfile

import matplotlib

matplotlib.use("Agg")

import pytest

from scripts.plot_station_calendar import main, output_filename


def write_archive(path, rows, column="Maximum temperature (Degree C)", name="Perth Airport"):
    lines = [f"Product code,Bureau of Meteorology station number,Year,Month,Day,{column},Quality"]
    for (year, month, day), value in rows.items():
        lines.append(f"IDCJAC0010,009021,{year},{month},{day},{value},Y")

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("data.csv", "\n".join(lines) + "\n")
        archive.writestr("note.txt", f"Station name: {name}\n")
    path.write_bytes(buffer.getvalue())
    return path


@pytest.fixture
def station_archive(tmp_path):
    rows = {}
    for year in (2021, 2022, 2023):
        for month, last_day in ((1, 31), (2, 28), (3, 31), (11, 30), (12, 31)):
            for day in range(1, last_day + 1):
                rows[(year, month, day)] = 25.0
    rows[(2022, 1, 15)] = 41.0
    return write_archive(tmp_path / "perth.zip", rows)


def test_requires_input():
    assert main(["--season", "Summer"]) == 2


def test_list_locations(station_archive, capsys):
    assert main(["--archive", str(station_archive), "--list-locations"]) == 0
    assert capsys.readouterr().out.strip() == "Perth Airport"


def test_writes_png(station_archive, tmp_path):
    output = tmp_path / "perth_summer.png"
    code = main([
        "--archive", str(station_archive),
        "--season", "Summer",
        "--start-year", "2021",
        "--end-year", "2023",
        "--thresholds", "30", "35", "40",
        "--output", str(output),
    ])
    assert code == 0
    assert output.exists()


def test_bad_archive(tmp_path):
    path = tmp_path / "broken.zip"
    path.write_bytes(b"not a zip")
    assert main(["--archive", str(path)]) == 1


def test_unknown_location(station_archive, tmp_path):
    code = main([
        "--archive", str(station_archive),
        "--location", "Alice Springs",
        "--output", str(tmp_path / "x.png"),
    ])
    assert code == 1


def test_output_filename_is_one_path_component():
    name = output_filename("Adelaide (West Terrace / ngayirdapira)", "Summer")
    assert name == "adelaide_west_terrace_ngayirdapira_summer.png"
    assert "/" not in name


def test_default_output_under_data_dir(station_archive, tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "out"))
    from src.config import get_settings
    get_settings.cache_clear()
    try:
        code = main([
            "--archive", str(station_archive),
            "--start-year", "2021",
            "--end-year", "2023",
            "--thresholds", "30", "35", "40",
        ])
    finally:
        get_settings.cache_clear()
    assert code == 0
    assert (tmp_path / "out" / "perth_airport_summer.png").exists()


def test_adjusted_years_warned_once(station_archive, tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        code = main([
            "--archive", str(station_archive),
            "--start-year", "1990",
            "--end-year", "2023",
            "--thresholds", "30", "35", "40",
            "--output", str(tmp_path / "perth.png"),
        ])
    assert code == 0
    adjusted = [r for r in caplog.records if "adjusted" in r.getMessage()]
    assert len(adjusted) == 1
