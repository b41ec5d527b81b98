"""Configuration model: which mods to search and where their files go."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

FILE_TYPES = (".jsonc", ".json")

_MISSING = object()


def _field(raw: dict[str, Any], key: str, default: Any) -> Any:
    value = raw.get(key, _MISSING)
    if value is _MISSING:
        lowered = key.lower()
        value = next((v for k, v in raw.items() if k.lower() == lowered), default)
    return default if value is None else value


def _object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected an object, got {type(value).__name__}")
    return value


def _array(value: Any, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{where}: expected an array, got {type(value).__name__}")
    return value


def _string(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{where}: expected a string, got {type(value).__name__}")
    return value


def _strings(value: Any, where: str) -> list[str]:
    return [_string(item, where) for item in _array(value, where)]


def _boolean(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{where}: expected a boolean, got {type(value).__name__}")
    return value


def _integer(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{where}: expected an integer, got {type(value).__name__}")
    return value


@dataclass
class PathInfo:
    """A directory together with the entries a clean must leave alone."""

    path: str = ""
    exclude_clean: list[str] = field(default_factory=list)

    @classmethod
    def _from_raw(cls, raw: Any, where: str) -> PathInfo:
        raw = _object(raw, where)
        return cls(
            path=_string(_field(raw, "path", ""), f"{where}.path"),
            exclude_clean=_strings(_field(raw, "excludeClean", []), f"{where}.excludeClean"),
        )

    def _to_raw(self) -> dict[str, Any]:
        return {"path": self.path, "excludeClean": list(self.exclude_clean)}


@dataclass
class PathRename:
    """Rename ``source`` to ``to`` in destinations of files under ``path``."""

    path: str = ""
    source: str = ""
    to: str = ""

    @classmethod
    def _from_raw(cls, raw: Any, where: str) -> PathRename:
        raw = _object(raw, where)
        return cls(
            path=_string(_field(raw, "path", ""), f"{where}.path"),
            source=_string(_field(raw, "from", ""), f"{where}.from"),
            to=_string(_field(raw, "to", ""), f"{where}.to"),
        )

    def _to_raw(self) -> dict[str, Any]:
        return {"path": self.path, "from": self.source, "to": self.to}


@dataclass
class PathCopy:
    """An extra copy from ``source`` to ``to``."""

    source: str = ""
    to: str = ""

    @classmethod
    def _from_raw(cls, raw: Any, where: str) -> PathCopy:
        raw = _object(raw, where)
        return cls(
            source=_string(_field(raw, "from", ""), f"{where}.from"),
            to=_string(_field(raw, "to", ""), f"{where}.to"),
        )

    def _to_raw(self) -> dict[str, Any]:
        return {"from": self.source, "to": self.to}


@dataclass
class Include:
    """Copy files whose path contains ``path`` to ``to``."""

    path: str = ""
    to: str = ""

    @classmethod
    def _from_raw(cls, raw: Any, where: str) -> Include:
        raw = _object(raw, where)
        return cls(
            path=_string(_field(raw, "path", ""), f"{where}.path"),
            to=_string(_field(raw, "to", ""), f"{where}.to"),
        )

    def _to_raw(self) -> dict[str, Any]:
        return {"path": self.path, "to": self.to}


@dataclass
class Expect:
    """A file or directory whose presence marks the root of a mod."""

    path: str = ""
    require: str = ""
    exclusive: bool = False
    base: int = 0

    @classmethod
    def _from_raw(cls, raw: Any, where: str) -> Expect:
        raw = _object(raw, where)
        return cls(
            path=_string(_field(raw, "path", ""), f"{where}.path"),
            require=_string(_field(raw, "require", ""), f"{where}.require"),
            exclusive=_boolean(_field(raw, "exclusive", False), f"{where}.exclusive"),
            base=_integer(_field(raw, "base", 0), f"{where}.base"),
        )

    def _to_raw(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "require": self.require,
            "exclusive": self.exclusive,
            "base": self.base,
        }


@dataclass
class PathSearch:
    """One mod source and the rules for extracting and placing its files."""

    mods: str = ""
    output: PathInfo = field(default_factory=PathInfo)
    extract: PathInfo = field(default_factory=PathInfo)
    export: PathInfo = field(default_factory=PathInfo)
    include: list[Include] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    expects: list[Expect] = field(default_factory=list)
    copy: list[PathCopy] = field(default_factory=list)
    rename: list[PathRename] = field(default_factory=list)

    def format_string(self, text: str) -> str:
        """Replace the ``{path}``, ``{output}``, ``{extract}`` and ``{export}`` keywords."""
        replacements = {
            "{path}": self.mods,
            "{output}": self.output.path,
            "{extract}": self.extract.path,
            "{export}": self.export.path,
        }
        for key, value in replacements.items():
            text = text.replace(key, value)
        return text

    def format_slice(self, items: list[str]) -> list[str]:
        """Apply :meth:`format_string` to every item."""
        return [self.format_string(item) for item in items]

    @classmethod
    def _from_raw(cls, raw: Any, where: str) -> PathSearch:
        raw = _object(raw, where)

        def many(key: str, kind: Any) -> list[Any]:
            name = f"{where}.{key}"
            return [kind._from_raw(item, name) for item in _array(_field(raw, key, []), name)]

        return cls(
            mods=_string(_field(raw, "mods", ""), f"{where}.mods"),
            output=PathInfo._from_raw(_field(raw, "output", {}), f"{where}.output"),
            extract=PathInfo._from_raw(_field(raw, "extract", {}), f"{where}.extract"),
            export=PathInfo._from_raw(_field(raw, "export", {}), f"{where}.export"),
            include=many("include", Include),
            exclude=_strings(_field(raw, "exclude", []), f"{where}.exclude"),
            expects=many("expects", Expect),
            copy=many("copy", PathCopy),
            rename=many("rename", PathRename),
        )

    def _to_raw(self) -> dict[str, Any]:
        return {
            "mods": self.mods,
            "output": self.output._to_raw(),
            "extract": self.extract._to_raw(),
            "export": self.export._to_raw(),
            "include": [item._to_raw() for item in self.include],
            "exclude": list(self.exclude),
            "expects": [item._to_raw() for item in self.expects],
            "copy": [item._to_raw() for item in self.copy],
            "rename": [item._to_raw() for item in self.rename],
        }


@dataclass
class Config:
    """A configuration file: a list of mod searches."""

    mods: list[PathSearch] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the configuration."""
        return {"mods": [search._to_raw() for search in self.mods]}

    @classmethod
    def from_dict(cls, raw: Any) -> Config:
        """Build a configuration from decoded JSON; raise ValueError on bad types."""
        raw = _object(raw, "config")
        return cls(
            mods=[
                PathSearch._from_raw(item, "mods")
                for item in _array(_field(raw, "mods", []), "mods")
            ]
        )


def _blank(text: str) -> str:
    return "".join(char if char in "\r\n" else " " for char in text)


def strip_jsonc(text: str) -> str:
    """Turn JSON with comments and trailing commas into plain JSON."""
    out: list[str] = []
    last = -1
    position, size = 0, len(text)

    while position < size:
        char = text[position]
        if char == '"':
            end = position + 1
            while end < size:
                if text[end] == "\\":
                    end += 2
                    continue
                end += 1
                if text[end - 1] == '"':
                    break
            out.append(text[position:end])
            last = len(out) - 1
            position = end
            continue
        if text.startswith("//", position):
            end = text.find("\n", position)
            end = size if end == -1 else end
            out.append(_blank(text[position:end]))
            position = end
            continue
        if text.startswith("/*", position):
            end = text.find("*/", position + 2)
            end = size if end == -1 else end + 2
            out.append(_blank(text[position:end]))
            position = end
            continue
        if char in "}]" and last >= 0 and out[last] == ",":
            out[last] = " "
        out.append(char)
        if not char.isspace():
            last = len(out) - 1
        position += 1

    return "".join(out)


def read(path: str | Path) -> Config:
    """Read a JSON or JSONC configuration file."""
    text = Path(path).read_text(encoding="utf-8")
    return Config.from_dict(json.loads(strip_jsonc(text)))


def write(path: str | Path, config: Config) -> None:
    """Write ``config`` as indented JSON, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(config.to_dict(), indent=4, ensure_ascii=False), encoding="utf-8")


def _default_clean_exclusions() -> list[str]:
    return ["{export}/saves", "{export}/logs", "{output}/saves", "{output}/logs"]


def _expects(*paths: str) -> list[Expect]:
    return [Expect(path=path) for path in paths]


def default() -> Config:
    """Return the configuration written when none exists yet."""
    return Config(
        mods=[
            PathSearch(
                mods="pd2mm/pd2/mods",
                output=PathInfo("pd2mm/pd2/output/mods", _default_clean_exclusions()),
                extract=PathInfo("pd2mm/pd2/extract/mods", _default_clean_exclusions()),
                export=PathInfo("", _default_clean_exclusions()),
                expects=_expects("mod.txt", "main.xml"),
            ),
            PathSearch(
                mods="pd2mm/pd2/mod_overrides",
                output=PathInfo("pd2mm/pd2/output/mod_overrides"),
                extract=PathInfo("pd2mm/pd2/extract/mod_overrides"),
                export=PathInfo(""),
                expects=_expects(
                    "main.xml",
                    "add.xml",
                    "effects",
                    "assets",
                    "units",
                    "hooks",
                    "guis",
                    "anims",
                    "soundbanks",
                    "fonts",
                ),
            ),
            PathSearch(
                mods="pd2mm/pd2/mod_overrides",
                output=PathInfo("pd2mm/pd2/output/mod_overrides"),
                extract=PathInfo("pd2mm/pd2/extract/mod_overrides"),
                export=PathInfo(""),
                expects=_expects("main.xml"),
            ),
        ]
    )