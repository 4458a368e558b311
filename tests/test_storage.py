import json

import pytest

from roomsearch.models import BuildingEntry, Index, IndexRange, RoomEntry
from roomsearch.storage import write_index


def sample_index() -> Index:
    return Index(
        version="2024-03-01T12:00:00+00:00",
        range=IndexRange(start="2024-03-04T00:00:00", end="2024-03-04T23:59:59"),
        buildings={"0": BuildingEntry(name="Science Park 1")},
        rooms={
            "0": RoomEntry(name="HS 1", building=0, capacity=120),
            "1": RoomEntry(name="MT 327"),
        },
        available={"2024-03-04": {"0": [(510, 600), (645, 1365)], "1": [(510, 1365)]}},
    )


def test_writes_index_json(tmp_path):
    path = write_index(sample_index(), tmp_path / "data" / "index.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["version"] == "2024-03-01T12:00:00+00:00"
    assert data["range"] == {"start": "2024-03-04T00:00:00", "end": "2024-03-04T23:59:59"}
    assert data["buildings"] == {"0": {"name": "Science Park 1"}}
    assert data["rooms"]["1"] == {"name": "MT 327", "building": -1, "capacity": -1}
    assert data["available"]["2024-03-04"]["0"] == [[510, 600], [645, 1365]]
    # no temporary files left behind
    assert [p.name for p in path.parent.iterdir()] == ["index.json"]


def test_failed_write_keeps_previous_file(tmp_path, monkeypatch):
    path = tmp_path / "index.json"
    path.write_text("previous", encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("roomsearch.storage.os.replace", broken_replace)

    with pytest.raises(OSError):
        write_index(sample_index(), path)

    assert path.read_text(encoding="utf-8") == "previous"
    assert [p.name for p in tmp_path.iterdir()] == ["index.json"]
