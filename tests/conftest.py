from collections.abc import Callable, Mapping
from pathlib import Path

from _support import RecordingEmitter
import pytest

from ditasmith.core.job import FileInfo, Job, JobCache
from ditasmith.modules import ImplementationRegistry, PipelineModule, XmlFilter


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def job_cache() -> JobCache:
    return JobCache()


@pytest.fixture
def module_registry() -> ImplementationRegistry[PipelineModule]:
    return ImplementationRegistry("module", PipelineModule)


@pytest.fixture
def filter_registry() -> ImplementationRegistry[XmlFilter]:
    return ImplementationRegistry("filter", XmlFilter)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "temp"
    path.mkdir()
    return path


@pytest.fixture
def make_job(temp_dir: Path) -> Callable[..., Job]:
    """Persist a job manifest with the given entries and documents."""

    def factory(*entries: FileInfo, documents: Mapping[str, str] | None = None) -> Job:
        job = Job(temp_dir)
        for entry in entries:
            job.add(entry)
        job.write()
        for uri, content in (documents or {}).items():
            target = temp_dir / uri
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return job

    return factory
