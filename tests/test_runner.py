import logging
import zipfile
from pathlib import Path

import pytest

from pd2mm.cleaner import Cleaner
from pd2mm.config import Config, Expect, PathInfo, PathSearch
from pd2mm.flags import Flags
from pd2mm.lang import set_language
from pd2mm.runner import Runner, run_with_error


@pytest.fixture(autouse=True)
def _english():
    set_language("en")


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _config():
    return Config(
        mods=[
            PathSearch(
                mods="mods",
                output=PathInfo("output/mods"),
                extract=PathInfo("extract/mods"),
                export=PathInfo(""),
                expects=[Expect(path="mod.txt")],
            )
        ]
    )


def _make_zip(path: Path, entries: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, text in entries.items():
            archive.writestr(name, text)


def test_run_with_injected_extractor(workdir):
    updates = []
    active_during = []
    calls = []

    def extractor(flags, search):
        calls.append(search.mods)
        active_during.append(runner.is_active())
        target = Path(search.extract.path) / "ModA" / "mod.txt"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("hello")

    runner = Runner(update=lambda: updates.append(True), extractor=extractor, cleaner=Cleaner())
    errors = runner.run(Flags(), [_config()])

    assert errors == []
    assert calls == ["mods"]
    assert active_during == [True]
    assert updates == [True]
    assert runner.is_active() is False
    assert (workdir / "output/mods/ModA/mod.txt").read_text() == "hello"


def test_register_update_replaces_callback(workdir):
    first, second = [], []
    runner = Runner(update=lambda: first.append(True))
    runner.register_update(lambda: second.append(True))

    runner.run(Flags(), [])

    assert first == []
    assert second == [True]


def test_update_failure_does_not_propagate(workdir):
    def failing():
        raise RuntimeError("update failed")

    runner = Runner(update=failing)
    assert runner.run(Flags(), []) == []
    assert runner.is_active() is False


def test_run_with_error_extracts_zip_archives(workdir):
    _make_zip(workdir / "mods/pack.zip", {"ModA/mod.txt": "zipped"})

    errors = run_with_error(Flags(), [_config()], Cleaner())

    assert errors == []
    assert (workdir / "extract/mods/pack/ModA/mod.txt").read_text() == "zipped"
    assert (workdir / "output/mods/ModA/mod.txt").read_text() == "zipped"


def test_output_is_cleaned_even_when_extraction_fails(workdir):
    stale = workdir / "output/mods/old.txt"
    stale.parent.mkdir(parents=True)
    stale.write_text("old")

    def extractor(flags, search):
        raise RuntimeError("cannot extract")

    errors = run_with_error(Flags(), [_config()], Cleaner(), extractor)

    assert errors == []
    assert not stale.exists()


def test_unsupported_archive_is_reported(workdir, caplog):
    (workdir / "mods").mkdir()
    (workdir / "mods/readme.txt").write_text("not an archive")
    caplog.set_level(logging.ERROR)

    run_with_error(Flags(), [_config()], Cleaner())

    assert any("readme.txt" in record.getMessage() for record in caplog.records)