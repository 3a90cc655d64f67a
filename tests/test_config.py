from pathlib import Path

import pytest

from ditasmith.core.config import (
    MapperConfig,
    MapperType,
    ModuleStage,
    Param,
    PipelineConfig,
    SaxPipeStage,
    XsltSourceMode,
    XsltStage,
    active_params,
)
from ditasmith.core.exceptions import PipelineConfigurationError
from ditasmith.core.loader import load_pipeline, parse_pipeline


def test_param_validity_requires_name_and_value():
    assert Param(name="a", value="1").is_valid()
    assert not Param(name="a").is_valid()
    assert not Param(value="1").is_valid()
    assert Param(name="loc", location=Path("dir/file.xml")).resolved_value == str(
        Path("dir/file.xml")
    )


def test_param_accepts_a_single_value_source():
    with pytest.raises(ValueError, match="only one of"):
        Param(name="a", value="1", expression="count(*)")


def test_active_params_filters_on_properties():
    params = [
        Param(name="a", value="1"),
        Param.model_validate({"name": "b", "value": "2", "if": "with.b"}),
        Param.model_validate({"name": "c", "value": "3", "unless": "with.b"}),
    ]
    assert active_params(params, set()) == {"a": "1", "c": "3"}
    assert active_params(params, {"with.b"}) == {"a": "1", "b": "2"}


def test_active_params_rejects_incomplete_entries():
    with pytest.raises(PipelineConfigurationError, match="Incomplete parameter"):
        active_params([Param(name="a")], set())


def test_stage_kind_discriminates_models():
    config = PipelineConfig.model_validate(
        {
            "stages": [
                {"kind": "module", "implementation": "debug"},
                {"kind": "transform", "style": "a.xsl", "in": "a.xml", "out": "b.xml"},
                {"kind": "filter-chain", "format": "dita"},
            ]
        }
    )
    module, transform, chain = config.stages
    assert isinstance(module, ModuleStage)
    assert isinstance(transform, XsltStage)
    assert isinstance(chain, SaxPipeStage)
    assert chain.format == ["dita"]
    assert [entry.format for entry in chain.default_fileset()] == ["dita"]


def test_module_stage_requires_implementation():
    with pytest.raises(PipelineConfigurationError, match="Module implementation not defined"):
        ModuleStage().validate_stage()


def test_second_mapper_is_rejected():
    with pytest.raises(ValueError, match="more than one mapper"):
        XsltStage.model_validate(
            {
                "style": "a.xsl",
                "mapper": [{"type": "flatten"}, {"type": "identity"}],
            }
        )

    stage = XsltStage(style=Path("a.xsl"), mapper=MapperConfig(type=MapperType.FLATTEN))
    with pytest.raises(PipelineConfigurationError, match="more than one mapper"):
        stage.add_mapper(MapperConfig())


def test_glob_mapper_requires_patterns():
    with pytest.raises(ValueError, match="requires 'from' and 'to'"):
        MapperConfig(type=MapperType.GLOB, from_pattern="*.dita")
    mapper = MapperConfig.model_validate({"type": "glob", "from": "*.dita", "to": "*.html"})
    assert mapper.to_pattern == "*.html"


@pytest.mark.parametrize(
    ("payload", "mode"),
    [
        ({"in": "a.xml", "out": "b.xml"}, XsltSourceMode.SINGLE),
        ({"fileset": [{"format": "dita"}]}, XsltSourceMode.FILESET),
        ({"includesfile": "inc.txt", "basedir": "src"}, XsltSourceMode.INCLUDES),
        ({"includes": [{"file": "inc.txt"}], "basedir": "src"}, XsltSourceMode.INCLUDES),
    ],
)
def test_transform_source_mode(payload, mode):
    stage = XsltStage.model_validate({"style": "a.xsl", **payload})
    assert stage.source_mode() is mode


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"in": "a.xml", "out": "b.xml", "fileset": [{"format": "dita"}]}, "mixes source modes"),
        ({"in": "a.xml"}, "requires both 'in' and 'out'"),
        ({"includesfile": "inc.txt"}, "requires 'basedir'"),
        ({}, "Unable to determine"),
    ],
)
def test_transform_source_mode_errors(payload, message):
    stage = XsltStage.model_validate({"style": "a.xsl", **payload})
    with pytest.raises(PipelineConfigurationError, match=message):
        stage.validate_stage()


def test_filter_chain_entries_need_implementation():
    stage = SaxPipeStage.model_validate({"filters": [{"name": "broken"}]})
    with pytest.raises(PipelineConfigurationError, match="broken"):
        stage.validate_stage()


def test_parse_pipeline_wraps_validation_errors():
    with pytest.raises(PipelineConfigurationError, match="Invalid pipeline declaration"):
        parse_pipeline({"stages": [{"kind": "unknown"}]})


def test_load_pipeline_resolves_base_dir(tmp_path: Path):
    declaration = tmp_path / "pipeline.yml"
    declaration.write_text(
        "message: hello\n"
        "temp-dir: out\n"
        "params:\n"
        "  - name: a\n"
        "    value: '1'\n"
        "stages:\n"
        "  - kind: module\n"
        "    implementation: debug\n",
        encoding="utf-8",
    )
    config = load_pipeline(declaration)
    assert config.base_dir == tmp_path.absolute()
    assert config.temp_dir == Path("out")
    assert config.message == "hello"

    declaration.write_text("base-dir: sub\n", encoding="utf-8")
    assert load_pipeline(declaration).base_dir == tmp_path.absolute() / "sub"


@pytest.mark.parametrize("content", ["stages: [\n", "- a\n- b\n"])
def test_load_pipeline_rejects_malformed_documents(tmp_path: Path, content: str):
    declaration = tmp_path / "pipeline.yml"
    declaration.write_text(content, encoding="utf-8")
    with pytest.raises(PipelineConfigurationError):
        load_pipeline(declaration)


def test_load_pipeline_reports_missing_file(tmp_path: Path):
    with pytest.raises(PipelineConfigurationError, match="Unable to read"):
        load_pipeline(tmp_path / "absent.yml")
