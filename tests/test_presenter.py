from pathlib import Path
from types import SimpleNamespace

import pytest

from ditasmith.core.job import FileInfo, Job
from ditasmith.pipeline import PipelineResult, StageResult
from ditasmith.ui.cli import presenter
from ditasmith.ui.cli.state import CLIState


class DummyTable:
    def __init__(self, *args: object, **kwargs: object) -> None:
        self.rows: list[tuple[object, ...]] = []
        self.columns: list[object] = []
        self.title = kwargs.get("title")

    def add_column(self, header: object, **kwargs: object) -> None:
        self.columns.append(header)

    def add_row(self, *cells: object) -> None:
        self.rows.append(cells)


@pytest.fixture
def rendered(monkeypatch: pytest.MonkeyPatch) -> list[object]:
    captured: list[object] = []
    console = SimpleNamespace(print=captured.append)
    monkeypatch.setattr(CLIState, "console", property(lambda _self: console))
    monkeypatch.setattr(presenter, "Table", DummyTable)
    return captured


def test_run_summary_lists_stages(rendered: list[object], tmp_path: Path) -> None:
    result = PipelineResult(
        job=Job(tmp_path),
        stages=[
            StageResult(1, "record", "module", 3),
            StageResult(2, "transform style.xsl", "transform", 41),
        ],
    )

    presenter.present_run_summary(CLIState(), result)

    (table,) = rendered
    assert table.title == "Pipeline Summary"
    assert table.columns == ["#", "Stage", "Kind", "Time"]
    assert table.rows[1] == ("2", "transform style.xsl", "transform", "41 ms")


def test_job_table_flags_entries(rendered: list[object], tmp_path: Path) -> None:
    job = Job(tmp_path)
    job.add(FileInfo(uri="b.dita", format="dita", has_conref=True))
    job.add(FileInfo(uri="a.png", is_resource_only=True, is_input=True))

    presenter.present_job(CLIState(), job)

    (table,) = rendered
    assert table.rows == [
        ("a.png", "", "", "yes", "yes"),
        ("b.dita", "dita", "yes", "", ""),
    ]


def test_empty_job_prints_notice(rendered: list[object], tmp_path: Path) -> None:
    presenter.present_job(CLIState(), Job(tmp_path))
    assert rendered == [f"No files recorded in {tmp_path / '.job.json'}"]
