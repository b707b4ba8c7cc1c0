from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from chainmock.exceptions import UsageError

DEFAULT_CONFIG_NAME = "chainmock.toml"
DEFAULT_CHILD_NAME_TEMPLATE = "{parent}.{method}"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class ChainMockConfig:
    verify_on_teardown: bool = True
    child_name_template: str = DEFAULT_CHILD_NAME_TEMPLATE

    def __post_init__(self) -> None:
        try:
            self.child_name_template.format(parent="parent", method="method")
        except (KeyError, IndexError, ValueError) as error:
            raise UsageError(
                f"invalid child_name_template {self.child_name_template!r}: {error}"
            ) from error

    def child_name(self, parent: str, method: str) -> str:
        """Diagnostic name for a double vivified under ``parent.method``."""
        return self.child_name_template.format(parent=parent, method=method)


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def doubles_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("doubles", {})
    return section if isinstance(section, dict) else {}


def _as_bool(value: TomlValue, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return default


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def config_from_section(section: TomlTable | None) -> ChainMockConfig:
    if not isinstance(section, dict):
        return ChainMockConfig()
    template = section.get("child_name_template")
    return ChainMockConfig(
        verify_on_teardown=_as_bool(section.get("verify_on_teardown"), True),
        child_name_template=(
            template if isinstance(template, str) else DEFAULT_CHILD_NAME_TEMPLATE
        ),
    )


def load_chainmock_config(
    root: Path | None = None,
    config_path: Path | None = None,
    overrides: TomlTable | None = None,
) -> ChainMockConfig:
    section = doubles_defaults(root=root, config_path=config_path)
    return config_from_section(merge_payload(overrides or {}, section))
