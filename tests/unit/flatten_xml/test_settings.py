from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from flatten_xml import settings as settings_module
from flatten_xml.settings import Settings, read_path_lines

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def no_log_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(settings_module.LOG_FILE_VAR, raising=False)
    monkeypatch.setattr(settings_module, "ENV_FILE", "")


@pytest.mark.unit
@pytest.mark.usefixtures("no_log_env")
def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.recursive is False
    assert settings.verbose is False
    assert settings.ignore_patterns == ()
    assert settings.paths == (".",)
    assert not settings.log_file


@pytest.mark.unit
def test_empty_paths_default_to_current_directory() -> None:
    assert Settings(paths=()).paths == (".",)
    assert Settings(paths=[]).paths == (".",)
    assert Settings(paths=["a", "b"]).paths == ("a", "b")


@pytest.mark.unit
def test_settings_are_frozen() -> None:
    settings = Settings(paths=("a",))

    with pytest.raises(ValidationError):
        settings.recursive = True  # type: ignore[misc]


@pytest.mark.unit
def test_read_path_lines_skips_blank_lines() -> None:
    assert read_path_lines(["a.txt\n", "\n", "  \n", "  src/b.py  \n", "c"]) == ["a.txt", "src/b.py", "c"]


@pytest.mark.unit
def test_from_sources_appends_extra_lines_after_positional() -> None:
    settings = Settings.from_sources(["x.txt"], ["y.txt\n", "\n", "z.txt\n"], recursive=True)

    assert settings.paths == ("x.txt", "y.txt", "z.txt")
    assert settings.recursive is True


@pytest.mark.unit
def test_from_sources_without_any_path_uses_current_directory() -> None:
    assert Settings.from_sources([], ["\n"]).paths == (".",)


@pytest.mark.unit
def test_log_file_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(settings_module.LOG_FILE_VAR, "trace.log")

    assert Settings().log_file == "trace.log"


@pytest.mark.unit
@pytest.mark.usefixtures("no_log_env")
def test_log_file_from_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(f"{settings_module.LOG_FILE_VAR}=from-dotenv.log\n", encoding="utf-8")
    monkeypatch.setattr(settings_module, "ENV_FILE", str(env_file))

    assert Settings().log_file == "from-dotenv.log"
    assert Settings(log_file="explicit.log").log_file == "explicit.log"
