from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from errors import VersionConflict  # noqa: E402
from persistence.disk_store import DiskDocumentStore  # noqa: E402
from persistence.memory_store import InMemoryDocumentStore  # noqa: E402
from settings import Settings  # noqa: E402


class InterleavingStore:
    """
    Wraps a real store and runs queued callbacks right before the next
    conditional write, simulating another client's write landing between
    this attempt's read and its write.
    """

    def __init__(self, inner: Any) -> None:
        self.inner = inner
        self.before_write: list[Callable[[], None]] = []
        self.conditional_writes = 0

    def read_with_version(self, name: str) -> tuple[Any, str]:
        return self.inner.read_with_version(name)

    def write_if_version(self, name: str, doc: Any, expected_version: str) -> str:
        self.conditional_writes += 1
        if self.before_write:
            self.before_write.pop(0)()
        return self.inner.write_if_version(name, doc, expected_version)

    def write_unconditional(self, name: str, doc: Any) -> str:
        return self.inner.write_unconditional(name, doc)


class AlwaysConflictingStore(InterleavingStore):
    def write_if_version(self, name: str, doc: Any, expected_version: str) -> str:
        self.conditional_writes += 1
        raise VersionConflict()


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        p = tmp_path / "data"
        p.mkdir(parents=True, exist_ok=True)
        return p

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    return tmp_path


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "storage_backend": "memory",
            "data_dir": None,
            "cors_allowed_origins": ("http://localhost:3000",),
            "log_level": "INFO",
            "debug_log_requests": False,
            "client_max_retries": 3,
            "client_base_delay": 0.0,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def disk_store(tmp_path: Path) -> DiskDocumentStore:
    return DiskDocumentStore(tmp_path / "documents")


@pytest.fixture(params=["memory", "disk"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> Any:
    if request.param == "memory":
        return InMemoryDocumentStore()
    return DiskDocumentStore(tmp_path / "documents")


@pytest.fixture
def interleaving_store(memory_store: InMemoryDocumentStore) -> InterleavingStore:
    return InterleavingStore(memory_store)


@pytest.fixture
def conflicting_store(memory_store: InMemoryDocumentStore) -> AlwaysConflictingStore:
    return AlwaysConflictingStore(memory_store)


@pytest.fixture
def recorded_sleeps() -> tuple[list[float], Callable[[float], Any]]:
    """An injectable sleep that records delays instead of waiting."""
    delays: list[float] = []

    async def _sleep(delay: float) -> None:
        delays.append(delay)

    return delays, _sleep
