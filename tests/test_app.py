import io
import zipfile
from pathlib import Path

import pytest

from pd2mm.app import (
    config_names,
    configs,
    main,
    open_log_file,
    setup,
    start,
    start_console_app,
)
from pd2mm.config import Config, Expect, PathInfo, PathSearch, default, read, write
from pd2mm.fileops import from_cwd
from pd2mm.flags import Flags, default_flags
from pd2mm.lang import set_language


@pytest.fixture(autouse=True)
def _english():
    set_language("en")


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_setup_writes_default_config_once(workdir):
    assert setup() is True
    path = workdir / "pd2mm/pd2.json"
    assert read(path) == default()

    path.write_text('{"mods": []}')
    assert setup() is False
    assert read(path) == Config(mods=[])


def test_config_names_prefers_flag():
    assert config_names(Flags(config="custom.json")) == ["custom.json"]


def test_config_names_lists_json_files(workdir):
    folder = workdir / "pd2mm"
    folder.mkdir()
    for name in ("b.jsonc", "a.json", "c.txt"):
        (folder / name).write_text("{}")

    assert config_names(Flags(config="")) == [
        from_cwd("pd2mm", "a.json"),
        from_cwd("pd2mm", "b.jsonc"),
    ]


def test_config_names_missing_directory_is_empty(workdir):
    assert config_names(Flags(config="")) == []


def test_configs_skips_unreadable_files(workdir):
    write("pd2mm/good.json", default())
    (workdir / "pd2mm/bad.json").write_text("not json")

    assert configs(Flags(config="")) == [default()]


def test_start_calls_update(workdir):
    updates = []
    errors = start(Flags(), [], lambda: updates.append(True))
    assert errors == []
    assert updates == [True]


def test_open_log_file_appends(workdir):
    flags = Flags(log="log.txt")
    with open_log_file(flags) as handle:
        assert handle.write("one\n") == 4
    with open_log_file(flags) as handle:
        assert handle.write("two\n") == 4
    assert (workdir / "log.txt").read_text() == "one\ntwo\n"


def test_start_console_app_version(workdir):
    flags = default_flags()
    flags.version = True
    log = io.StringIO()
    called = []

    status = start_console_app(flags, ["-version"], log, lambda: called.append(True))

    assert status == 0
    assert called == [True]
    assert "This work is free of charge" in log.getvalue()


def test_start_console_app_rejects_empty_config(workdir):
    flags = Flags(config="")
    status = start_console_app(flags, ["-config", ""], io.StringIO(), lambda: None)
    assert status == 1


def test_start_console_app_without_config_flag_clears_it(workdir):
    flags = default_flags()
    status = start_console_app(flags, [], io.StringIO(), lambda: None)
    assert status == 0
    assert flags.config == ""


def test_main_runs_configured_pass(workdir):
    config = Config(
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
    write("pd2mm/pd2.json", config)
    archive_path = workdir / "mods/pack.zip"
    archive_path.parent.mkdir()
    with zipfile.ZipFile(archive_path, "w") as archive:
        archive.writestr("ModA/mod.txt", "zipped")

    status = main(["-config", "pd2mm/pd2.json"])

    assert status == 0
    assert (workdir / "output/mods/ModA/mod.txt").read_text() == "zipped"
    assert Path(workdir / "pd2mm_log.txt").read_text() != ""
    assert read(workdir / "pd2mm/pd2.json") == config