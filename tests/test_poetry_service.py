import logging
import random

import pytest

from computer_poet.app.data.database import SQLitePoemArchive
from computer_poet.app.services.poetry_service import PoetryService
from computer_poet.core import (
    EmptyCandidatePoolError,
    InvalidOptionsError,
    PoetryEngine,
    WordRecord,
)
from computer_poet.utils.telemetry import StructuredTelemetry

from conftest import PLACE_TEMPLATE, build_store


@pytest.fixture
def service(store):
    archive = SQLitePoemArchive(":memory:")
    yield PoetryService(PoetryEngine(store, rng=random.Random(3)), archive)
    archive.close()


def test_generate_poem_records_telemetry(service):
    poem = service.generate_poem("quiet", 2, 2)

    assert len(poem.lines) == 4
    snapshot = service.get_latest_telemetry()
    assert snapshot["name"] == "generate_poem"
    assert snapshot["counters"]["poem.invoked"] == 1
    assert snapshot["counters"]["poem.completed"] == 1
    assert snapshot["metadata"]["input.style"] == "quiet"
    assert snapshot["metadata"]["result.lines"] == 4
    assert "poem.generate" in snapshot["timings"]


def test_generate_poem_logs_request(service, caplog):
    caplog.set_level(logging.INFO, logger="computer_poet.app.services.poetry_service")

    service.generate_poem()

    messages = [record.message for record in caplog.records]
    assert any("Poem request received" in message for message in messages)
    assert any("Poem request completed" in message for message in messages)


def test_invalid_options_fail_before_tracing(service):
    with pytest.raises(InvalidOptionsError):
        service.generate_poem(stanza_count=0)
    assert service.get_latest_telemetry() == {}


def test_generation_failure_is_logged_and_reraised(caplog):
    store = build_store(
        sentence_structures=[PLACE_TEMPLATE],
        intransitive_verbs=[WordRecord("飞翔", "ang")],
    )
    service = PoetryService(PoetryEngine(store, rng=random.Random(1)))
    caplog.set_level(logging.ERROR, logger="computer_poet.app.services.poetry_service")

    with pytest.raises(EmptyCandidatePoolError):
        service.generate_poem(use_rhyme=True, rhyme_scheme="ou")

    assert any("Poem request failed" in record.message for record in caplog.records)
    snapshot = service.get_latest_telemetry()
    assert snapshot["counters"]["poem.failed"] == 1
    assert "poem.completed" not in snapshot["counters"]


def test_save_poem_archives_and_exports(service, tmp_path):
    poem = service.generate_poem()

    result = service.save_poem(poem, "春日", export_dir=tmp_path)

    assert result["poem_number"] == 1
    assert result["path"] == tmp_path / "cp000001.txt"
    assert result["path"].exists()
    assert service.archive.fetch_poem(1)["title"] == "春日"


def test_save_poem_without_export(service):
    poem = service.generate_poem()
    assert service.save_poem(poem, "春日") == {"poem_number": 1, "path": None}


def test_save_without_archive_raises(store):
    service = PoetryService(PoetryEngine(store), telemetry=StructuredTelemetry())
    poem = service.generate_poem()
    with pytest.raises(RuntimeError):
        service.save_poem(poem, "春日")


def test_format_poem_uses_markdown(service):
    poem = service.generate_poem(lines_per_stanza=2)
    poem.title = "春日"
    assert service.format_poem(poem, 4).startswith("### 春日")
