import json

import pytest

from automation.shared.scan_contracts import DayMatch, LinkTarget, ScanResult
from infrastructure.results import write_results

LINK = LinkTarget("Sales Demo", "https://acme.example.com/demo")
STAMP = "2025-10-01T14:00:00.000Z"


def test_found_result_serialises_without_note_or_error():
    result = ScanResult.found(LINK, DayMatch("2025-10-17", 4), days_from_today=16, scanned_at=STAMP)
    assert result.to_dict() == {
        "name": "Sales Demo",
        "url": "https://acme.example.com/demo",
        "earliestDate": "2025-10-17",
        "daysFromToday": 16,
        "slotCountObserved": 4,
        "scannedAt": STAMP,
    }


def test_exhausted_and_failed_results_carry_their_explanation():
    exhausted = ScanResult.exhausted(LINK, note="nothing", scanned_at=STAMP).to_dict()
    failed = ScanResult.failed(LINK, error="boom", scanned_at=STAMP).to_dict()

    assert exhausted["note"] == "nothing" and "error" not in exhausted
    assert failed["error"] == "boom" and "note" not in failed
    for payload in (exhausted, failed):
        assert payload["earliestDate"] is None
        assert payload["daysFromToday"] is None
        assert payload["slotCountObserved"] == 0


def test_write_results_preserves_order(tmp_path):
    results = [
        ScanResult.failed(LinkTarget("B", "https://b"), error="boom", scanned_at=STAMP),
        ScanResult.exhausted(LinkTarget("A", "https://a"), note="none", scanned_at=STAMP),
    ]
    target = tmp_path / "nested" / "availability.json"

    write_results(results, target)

    payload = json.loads(target.read_text(encoding="utf-8"))
    assert [entry["name"] for entry in payload] == ["B", "A"]
    assert list(tmp_path.joinpath("nested").glob("*.tmp")) == []


def test_write_results_propagates_os_errors(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(OSError):
        write_results([], blocker / "availability.json")
