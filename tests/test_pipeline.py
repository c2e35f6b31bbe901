"""Tests for the classification-and-relocation pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from ai_file_organize.classification import TransportError
from ai_file_organize.config.models import AppConfig
from ai_file_organize.ingestion import MetadataUnavailable
from ai_file_organize.organization import Relocator, UnmatchedLabelError
from ai_file_organize.pipeline import EntryOutcome, EntryState, PipelineOrchestrator, RunContext
from ai_file_organize.pipeline import orchestrator as orchestrator_module


class _StubClassifier:
    """Label descriptors by looking for known names in them."""

    def __init__(self, pick: Callable[[str], str]) -> None:
        self.pick = pick
        self.descriptors: list[str] = []

    def classify(self, descriptor: str, categories: Iterable[str]) -> str:
        self.descriptors.append(descriptor)
        return self.pick(descriptor)

    def close(self) -> None:
        pass


def _config(out: Path, *, with_others: bool = True) -> AppConfig:
    rules = [
        {"prompt": "movie", "dir": str(out / "movies")},
        {"prompt": "document", "dir": str(out / "documents")},
    ]
    if with_others:
        rules.append({"prompt": "others", "dir": str(out / "misc")})
    return AppConfig.model_validate({"classifications": rules})


def _orchestrator(config: AppConfig, classifier: _StubClassifier) -> PipelineOrchestrator:
    context = RunContext(config=config, classifier=classifier, relocator=Relocator())  # type: ignore[arg-type]
    return PipelineOrchestrator(context)


def _by_name(descriptor: str) -> str:
    if ".mkv" in descriptor or "Film" in descriptor:
        return "movie"
    if ".pdf" in descriptor:
        return "document"
    return "others"


def test_run_relocates_every_entry(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    (staging / "Film Collection").mkdir(parents=True)
    (staging / "Film Collection" / "part1.mkv").write_text("x", encoding="utf-8")
    (staging / "invoice.pdf").write_text("x", encoding="utf-8")
    (staging / "random.bin").write_text("x", encoding="utf-8")
    out = tmp_path / "out"

    report = _orchestrator(_config(out), _StubClassifier(_by_name)).run(staging)

    assert report.counts() == {"entries": 3, "relocated": 3, "failed": 0}
    assert (out / "movies" / "Film Collection" / "part1.mkv").exists()
    assert (out / "documents" / "invoice.pdf").exists()
    assert (out / "misc" / "random.bin").exists()
    assert list(staging.iterdir()) == []


def test_directories_are_processed_before_files(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "b.pdf").write_text("x", encoding="utf-8")
    (staging / "Film").mkdir()
    classifier = _StubClassifier(_by_name)

    report = _orchestrator(_config(tmp_path / "out"), classifier).run(staging)

    assert [outcome.entry.name for outcome in report.outcomes] == ["Film", "b.pdf"]
    assert classifier.descriptors[0] == "└── Film"


def test_classification_failure_does_not_stop_batch(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "broken.mkv").write_text("x", encoding="utf-8")
    (staging / "fine.pdf").write_text("x", encoding="utf-8")
    out = tmp_path / "out"

    def flaky(descriptor: str) -> str:
        if "broken" in descriptor:
            raise TransportError("connection reset")
        return _by_name(descriptor)

    orchestrator = _orchestrator(_config(out), _StubClassifier(flaky))
    seen: list[EntryOutcome] = []

    report = orchestrator.run(staging, on_outcome=seen.append)

    assert len(seen) == 2
    failed = report.failed[0]
    assert failed.entry.name == "broken.mkv"
    assert failed.failed_at is EntryState.DESCRIBED
    assert "connection reset" in (failed.error or "")
    assert (staging / "broken.mkv").exists()
    assert (out / "documents" / "fine.pdf").exists()
    assert orchestrator.context.failures == [failed]


def test_describe_failure_does_not_stop_batch(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "locked.pdf").write_text("x", encoding="utf-8")
    (staging / "movie.mkv").write_text("x", encoding="utf-8")
    out = tmp_path / "out"
    real_describe = orchestrator_module.describe

    def describe(path: Path) -> str:
        if path.name == "locked.pdf":
            raise MetadataUnavailable(f"Cannot read metadata for {path}")
        return real_describe(path)

    monkeypatch.setattr(orchestrator_module, "describe", describe)

    report = _orchestrator(_config(out), _StubClassifier(_by_name)).run(staging)

    failed = report.failed[0]
    assert failed.entry.name == "locked.pdf"
    assert failed.failed_at is EntryState.DISCOVERED
    assert (staging / "locked.pdf").exists()
    assert (out / "movies" / "movie.mkv").exists()
    assert report.counts() == {"entries": 2, "relocated": 1, "failed": 1}


def test_relocation_failure_is_isolated(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "a.pdf").write_text("x", encoding="utf-8")
    out = tmp_path / "out"
    out.mkdir()
    # a plain file where the documents directory should be
    (out / "documents").write_text("blocker", encoding="utf-8")

    report = _orchestrator(_config(out), _StubClassifier(_by_name)).run(staging)

    assert report.failed[0].failed_at is EntryState.RESOLVED
    assert (staging / "a.pdf").exists()


def test_unmatched_label_aborts_run(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "Film").mkdir()
    (staging / "mystery.bin").write_text("x", encoding="utf-8")
    out = tmp_path / "out"
    orchestrator = _orchestrator(_config(out, with_others=False), _StubClassifier(_by_name))

    with pytest.raises(UnmatchedLabelError):
        orchestrator.run(staging)

    assert (out / "movies" / "Film").is_dir()
    assert (staging / "mystery.bin").exists()


def test_rerun_skips_destinations_inside_staging(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "movie.mkv").write_text("x", encoding="utf-8")
    config = _config(staging)
    classifier = _StubClassifier(_by_name)

    first = _orchestrator(config, classifier).run(staging)
    second = _orchestrator(config, classifier).run(staging)

    assert first.counts()["relocated"] == 1
    assert second.outcomes == []
    assert (staging / "movies" / "movie.mkv").exists()


def test_staging_that_is_a_destination_is_left_alone(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "a.bin").write_text("x", encoding="utf-8")
    config = AppConfig.model_validate(
        {"classifications": [{"prompt": "others", "dir": str(staging)}]}
    )

    for _ in range(3):
        report = _orchestrator(config, _StubClassifier(_by_name)).run(staging)
        assert report.outcomes[0].state is EntryState.RELOCATED

    assert [path.name for path in staging.iterdir()] == ["a.bin"]


def test_entry_holding_a_nested_destination_is_not_moved(tmp_path: Path) -> None:
    staging = tmp_path / "inbox"
    movies = staging / "sorted" / "movies"
    movies.mkdir(parents=True)
    (movies / "old.mkv").write_text("x", encoding="utf-8")
    (staging / "film.mkv").write_text("x", encoding="utf-8")
    config = AppConfig.model_validate(
        {
            "classifications": [
                {"prompt": "movie", "dir": str(movies)},
                {"prompt": "others", "dir": str(tmp_path / "misc")},
            ]
        }
    )

    report = _orchestrator(config, _StubClassifier(_by_name)).run(staging)

    assert [outcome.entry.name for outcome in report.outcomes] == ["film.mkv"]
    assert sorted(path.name for path in movies.iterdir()) == ["film.mkv", "old.mkv"]
    assert not (tmp_path / "misc").exists()


def test_report_serializes_outcomes(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    (staging / "x.pdf").write_text("x", encoding="utf-8")

    report = _orchestrator(_config(tmp_path / "out"), _StubClassifier(_by_name)).run(staging)
    payload = report.to_dict()

    assert payload["counts"]["relocated"] == 1
    entry = payload["entries"][0]
    assert entry["state"] == "relocated"
    assert entry["label"] == "document"
    assert entry["kind"] == "file"
