"""Tests for RunLogger and serialization helpers."""

import json
from datetime import UTC, datetime
from pathlib import Path

from equipment_intel.config import TimingConfig
from equipment_intel.data import (
    CardFailure,
    CardOutcome,
    CardPreview,
    ModalState,
    NewsArticle,
    QueryStatus,
    TabContent,
)
from equipment_intel.run_logger import RunLogger, _serialize

# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(3.14) == 3.14
    assert _serialize(True) is True


def test_serialize_list() -> None:
    result = _serialize([1, "two", None])
    assert result == [1, "two", None]


def test_serialize_dict() -> None:
    result = _serialize({"a": 1, "b": "two"})
    assert result == {"a": 1, "b": "two"}


def test_serialize_enum() -> None:
    assert _serialize(ModalState.CLOSED_VERIFIED) == "closed_verified"
    assert _serialize(QueryStatus.PARTIAL) == "partial"


def test_serialize_datetime() -> None:
    stamp = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    assert _serialize(stamp) == "2026-03-01T12:00:00+00:00"


def test_serialize_frozen_dataclass() -> None:
    article = NewsArticle(
        title="Upgrade ordered",
        source="Defense News",
        link="https://example.com/1",
        published_at=datetime(2026, 3, 1, tzinfo=UTC),
    )
    result = _serialize(article)
    assert isinstance(result, dict)
    assert result["title"] == "Upgrade ordered"
    assert result["published_at"] == "2026-03-01T00:00:00+00:00"


def test_serialize_nested_tuples() -> None:
    tab = TabContent(
        tab_label="System",
        key_value_rows=(("Range", "500 km"),),
        tables=((("Warhead", "300 kg"),),),
    )
    result = _serialize(tab)
    assert result["key_value_rows"] == [["Range", "500 km"]]
    assert result["tables"] == [[["Warhead", "300 kg"]]]


def test_serialize_card_outcome() -> None:
    outcome = CardOutcome(
        index=0,
        preview=CardPreview(title="T-90"),
        final_state=ModalState.CLOSED_VERIFIED,
        transitions=(ModalState.CLOSED, ModalState.OPENING),
        failures=(CardFailure(kind="CardOpenTimeout", message="slow"),),
    )
    result = _serialize(outcome)
    assert result["final_state"] == "closed_verified"
    assert result["transitions"] == ["closed", "opening"]
    assert result["failures"][0]["kind"] == "CardOpenTimeout"
    assert result["extraction"] is None


def test_serialize_pydantic_model() -> None:
    result = _serialize(TimingConfig())
    assert result["gate_timeout_ms"] == 5000


def test_serialize_path() -> None:
    result = _serialize(Path("/some/path"))
    assert result == "/some/path"


# -- RunLogger disabled tests --


def test_run_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    logger.start_run("T-90", "US")
    logger.log_stage("test", "TestComponent", "input", "output", 1.0)
    result = logger.finish_run(status="success")

    assert result is None
    assert logger.last_log_path is None
    # No files written
    assert list(tmp_path.iterdir()) == []


# -- RunLogger enabled tests --


def test_run_logger_start_and_finish(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    assert logger.enabled

    logger.start_run("T-90", "IN")
    path = logger.finish_run(status=QueryStatus.SUCCESS, card_count=2, article_count=7)

    assert path is not None
    assert path.exists()
    assert path.suffix == ".json"
    assert logger.last_log_path == path

    data = json.loads(path.read_text())
    assert data["query"] == "T-90"
    assert data["region"] == "IN"
    assert data["status"] == "success"
    assert data["card_count"] == 2
    assert data["article_count"] == 7
    assert data["error"] is None
    assert data["completed_at"] is not None


def test_run_logger_log_stages(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.start_run("T-90")

    preview = CardPreview(title="T-90", category="Tank")
    logger.log_stage(
        stage="enumerate",
        component="EquipmentScraper",
        input_data=None,
        output_data=[preview],
        duration_seconds=0.5,
    )
    logger.log_stage(
        stage="gate",
        component="EquipmentScraper",
        input_data=None,
        output_data={"state": "absent", "strategy": None},
        duration_seconds=0.01,
    )
    path = logger.finish_run(status="partial", error="ResultsNotFound")

    assert path is not None
    data = json.loads(path.read_text())

    assert len(data["stages"]) == 2
    assert data["stages"][0]["stage"] == "enumerate"
    assert data["stages"][0]["component"] == "EquipmentScraper"
    assert data["stages"][0]["output"][0]["category"] == "Tank"
    assert data["stages"][0]["duration_seconds"] == 0.5
    assert data["stages"][1]["output"] == {"state": "absent", "strategy": None}
    assert data["error"] == "ResultsNotFound"


def test_run_logger_creates_log_dir(tmp_path: Path) -> None:
    log_dir = tmp_path / "nested" / "logs"
    logger = RunLogger(log_dir=log_dir, enabled=True)

    logger.start_run("test")
    path = logger.finish_run(status="failed")

    assert path is not None
    assert log_dir.exists()


def test_run_logger_filename_format(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)

    logger.start_run("test")
    path = logger.finish_run(status="success")

    assert path is not None
    assert path.name.startswith("run_")
    assert path.name.endswith(".json")
    # Should not contain colons (filesystem-unsafe)
    assert ":" not in path.name


def test_run_logger_log_stage_without_start(tmp_path: Path) -> None:
    """log_stage before start_run should be a no-op."""
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.log_stage("test", "TestComponent", "input", "output", 1.0)


def test_run_logger_finish_without_start(tmp_path: Path) -> None:
    """finish_run before start_run should return None."""
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    assert logger.finish_run(status="success") is None


def test_run_logger_one_file_per_run(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    for query in ("T-90", "BrahMos"):
        logger.start_run(query)
        logger.finish_run(status="success")
    assert len(list(tmp_path.glob("run_*.json"))) == 2
