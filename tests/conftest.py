from datetime import datetime, timezone
from pathlib import Path
import sys

from _pytest.monkeypatch import MonkeyPatch
import pytest

# Ensure repo root is importable when running without an editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

CLIPSENSE_ENV_VARS = (
    "CLIPSENSE_AUTO_DETECT_LANGUAGE",
    "CLIPSENSE_SHOW_INTELLIGENT_SUGGESTIONS",
    "CLIPSENSE_DEBOUNCE_MS",
)


@pytest.fixture(scope="session", autouse=True)
def _session_env(tmp_path_factory: pytest.TempPathFactory) -> None:
    """
    Session-level hermetic env that does not depend on the function-scoped
    `monkeypatch` fixture (avoids ScopeMismatch).
    """
    home = tmp_path_factory.mktemp("home")
    mp = MonkeyPatch()
    mp.setenv("HOME", str(home))
    try:
        yield
    finally:
        mp.undo()


@pytest.fixture(autouse=True)
def hermetic_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Autouse: each test runs in its own tmp cwd with no clipsense overrides set.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    for name in CLIPSENSE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # A marker stops project-root discovery from walking above the tmp dir
    (tmp_path / ".git").mkdir()
    return tmp_path


@pytest.fixture
def frozen_now(monkeypatch: pytest.MonkeyPatch):
    """Pin the detectors' clock; returns a setter taking an aware datetime."""
    from clipsense.detectors import common

    def _freeze(moment: datetime) -> datetime:
        monkeypatch.setattr(common, "now", lambda: moment)
        return moment

    _freeze(datetime(2024, 1, 1, tzinfo=timezone.utc))
    return _freeze
