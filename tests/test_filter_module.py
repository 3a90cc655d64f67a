from pathlib import Path

from _support import MarkFilter, WrapFilter
from lxml import etree

from ditasmith.core.context import RunContext
from ditasmith.core.job import FileInfo
from ditasmith.core.selectors import FileInfoFilter, combine
from ditasmith.modules import FilterPair, XmlFilterModule


def _root(path: Path) -> etree._Element:
    return etree.parse(str(path)).getroot()


def test_filters_run_in_order_on_matching_entries(make_job, temp_dir: Path) -> None:
    job = make_job(
        FileInfo(uri="a.dita", format="dita"),
        FileInfo(uri="m.ditamap", format="ditamap"),
        documents={"a.dita": "<topic/>", "m.ditamap": "<map/>"},
    )
    marker = MarkFilter()
    marker.set_param("value", "first")
    module = XmlFilterModule()
    module.set_job(job)
    module.set_file_info_filter(
        combine([FileInfoFilter(format="dita"), FileInfoFilter(format="ditamap")])
    )
    module.set_processing_pipe(
        [
            FilterPair(marker, combine([FileInfoFilter(format="dita")])),
            FilterPair(WrapFilter(), combine([FileInfoFilter(format="dita")])),
        ]
    )

    module.execute(RunContext())

    topic = _root(temp_dir / "a.dita")
    assert topic.tag == "wrapper"
    assert topic[0].tag == "topic"
    assert topic[0].get("marked") == "first"
    assert _root(temp_dir / "m.ditamap").get("marked") is None
    assert marker.current_file == temp_dir / "a.dita"
    assert marker.job is job


def test_output_keeps_xml_declaration(make_job, temp_dir: Path) -> None:
    job = make_job(FileInfo(uri="a.dita", format="dita"), documents={"a.dita": "<topic/>"})
    module = XmlFilterModule()
    module.set_job(job)
    module.set_processing_pipe([FilterPair(MarkFilter(), lambda info: True)])

    module.execute(RunContext())

    assert (temp_dir / "a.dita").read_text(encoding="utf-8").startswith("<?xml")


def test_missing_document_warns_and_continues(make_job, temp_dir: Path, emitter) -> None:
    job = make_job(
        FileInfo(uri="gone.dita", format="dita"),
        FileInfo(uri="here.dita", format="dita"),
        documents={"here.dita": "<topic/>"},
    )
    module = XmlFilterModule()
    module.set_job(job)
    module.set_logger(emitter)
    module.set_processing_pipe([FilterPair(MarkFilter(), lambda info: True)])

    module.execute(RunContext())

    assert len(emitter.warnings) == 1
    assert "gone.dita" in emitter.warnings[0]
    assert _root(temp_dir / "here.dita").get("marked") == "yes"


def test_entries_without_applicable_filters_are_untouched(make_job, temp_dir: Path) -> None:
    job = make_job(FileInfo(uri="a.dita", format="dita"), documents={"a.dita": "<topic/>"})
    module = XmlFilterModule()
    module.set_job(job)
    module.set_processing_pipe([FilterPair(MarkFilter(), lambda info: False)])

    module.execute(RunContext())

    assert (temp_dir / "a.dita").read_text(encoding="utf-8") == "<topic/>"
