import json
from pathlib import Path

import pytest

from ditasmith.core.exceptions import JobError
from ditasmith.core.job import JOB_FILENAME, FileInfo, Job, JobCache, get_job


def test_missing_manifest_yields_empty_job(temp_dir: Path) -> None:
    job = Job(temp_dir)
    assert len(job) == 0
    assert job.generation == 0
    assert not job.is_stale()


def test_write_persists_entries_and_bumps_generation(temp_dir: Path) -> None:
    job = Job(temp_dir)
    job.add(FileInfo(uri="b.dita", format="dita", is_input=True))
    job.add(FileInfo(uri="a.ditamap", format="ditamap", extra={"custom": 3}))
    job.properties["uplevels"] = "../"
    job.write()
    job.write()

    payload = json.loads((temp_dir / JOB_FILENAME).read_text(encoding="utf-8"))
    assert payload["generation"] == 2
    assert list(payload["files"]) == ["a.ditamap", "b.dita"]

    reloaded = Job(temp_dir)
    assert reloaded.generation == 2
    assert reloaded.properties == {"uplevels": "../"}
    assert [entry.uri for entry in reloaded] == ["a.ditamap", "b.dita"]
    assert reloaded.get_file_info("b.dita").is_input
    assert reloaded.get_file_info("a.ditamap").extra == {"custom": 3}


def test_file_infos_applies_predicate(temp_dir: Path) -> None:
    job = Job(temp_dir)
    job.add(FileInfo(uri="topic.dita", format="dita"))
    job.add(FileInfo(uri="image.png", format="image"))

    assert [entry.uri for entry in job.file_infos(lambda info: info.format == "dita")] == [
        "topic.dita"
    ]
    assert "image.png" in job
    assert job.remove("image.png").format == "image"
    assert job.remove("image.png") is None


def test_instance_goes_stale_when_another_writer_persists(temp_dir: Path) -> None:
    first = Job(temp_dir)
    first.write()
    second = Job(temp_dir)
    assert not first.is_stale()

    second.write()

    assert first.is_stale()
    assert not second.is_stale()


def test_mark_stale_forces_staleness(temp_dir: Path) -> None:
    job = Job(temp_dir)
    job.mark_stale()
    assert job.is_stale()


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"files": [1]}'])
def test_corrupt_manifest_raises_job_error(temp_dir: Path, content: str) -> None:
    (temp_dir / JOB_FILENAME).write_text(content, encoding="utf-8")
    with pytest.raises(JobError):
        Job(temp_dir)


def test_cache_returns_same_instance_until_stale(temp_dir: Path, job_cache: JobCache) -> None:
    first = job_cache.get_or_create(temp_dir, "run-1")
    again = job_cache.get_or_create(temp_dir, "run-1")
    assert again is first

    first.mark_stale()
    rebuilt = job_cache.get_or_create(temp_dir, "run-1")

    assert rebuilt is not first
    assert job_cache.peek("run-1") is rebuilt


def test_cache_rebuilds_after_external_write(temp_dir: Path, job_cache: JobCache) -> None:
    cached = job_cache.get_or_create(temp_dir, "run-1")
    external = Job(temp_dir)
    external.add(FileInfo(uri="topic.dita", format="dita"))
    external.write()

    rebuilt = job_cache.get_or_create(temp_dir, "run-1")

    assert rebuilt is not cached
    assert "topic.dita" in rebuilt


def test_cache_keeps_identities_apart(tmp_path: Path, job_cache: JobCache) -> None:
    one = job_cache.get_or_create(tmp_path / "one", "a")
    two = job_cache.get_or_create(tmp_path / "two", "b")
    assert one is not two
    assert len(job_cache) == 2

    moved = job_cache.get_or_create(tmp_path / "three", "a")
    assert moved is not one
    assert moved.temp_dir == tmp_path / "three"

    assert job_cache.invalidate("b") is two
    assert "b" not in job_cache
    job_cache.clear()
    assert len(job_cache) == 0


def test_get_job_uses_supplied_cache(temp_dir: Path, job_cache: JobCache) -> None:
    job = get_job(temp_dir, "identity", cache=job_cache)
    assert job_cache.peek("identity") is job
