"""Tests for on-disk report persistence."""

import json

import pytest

from tests.helpers import FIXED_NOW, VALID_MALE

from app.core.enums import ReportFormat
from app.services.body_metrics import compute_metrics
from app.services.report import render_report
from app.services.report_store import ReportStorageError, ReportStore, safe_filename


def _record(**overrides):
    payload = dict(VALID_MALE)
    payload.update(overrides)
    return compute_metrics(payload, now=FIXED_NOW).record


@pytest.mark.parametrize(
    "name, filename",
    [
        ("John Doe", "John_Doe_data.txt"),
        ("../etc/passwd", "___etc_passwd_data.txt"),
        ("Zoë-O'Neil", "Zo__O_Neil_data.txt"),
    ],
)
def test_safe_filename(name, filename):
    assert safe_filename(name) == filename


def test_json_report_creates_directory(tmp_path):
    store = ReportStore(tmp_path / "nested" / "data")
    record = _record()

    path = store.save(record)

    assert path == tmp_path / "nested" / "data" / "John_Doe_data.txt"
    content = path.read_text(encoding="utf-8")
    assert json.loads(content) == record.to_dict()
    assert content.startswith('{\n  "name": "John Doe"')


def test_text_report(tmp_path):
    store = ReportStore(tmp_path, ReportFormat.TEXT)
    record = _record()

    path = store.save(record)

    assert path.read_text(encoding="utf-8") == render_report(record)


def test_same_name_overwrites_previous_report(tmp_path):
    store = ReportStore(tmp_path)
    store.save(_record(weight_lbs=160))
    path = store.save(_record(weight_lbs=200))

    assert json.loads(path.read_text())["weight_lbs"] == 200
    # No temp files left behind
    assert sorted(p.name for p in tmp_path.iterdir()) == ["John_Doe_data.txt"]


def test_unwritable_location_raises_storage_error(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")
    store = ReportStore(blocker)

    with pytest.raises(ReportStorageError):
        store.save(_record())
    assert not store.is_writable()


def test_is_writable(tmp_path):
    assert ReportStore(tmp_path / "fresh").is_writable()
