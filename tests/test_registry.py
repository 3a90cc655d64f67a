from _support import MarkFilter, RecordingModule
import pytest

from ditasmith.core.exceptions import PipelineConfigurationError
from ditasmith.modules import ImplementationRegistry, PipelineModule, XmlFilter, load_attribute


def test_register_and_create(module_registry: ImplementationRegistry[PipelineModule]) -> None:
    log: list[RecordingModule] = []
    module_registry.register("record", lambda: RecordingModule(log))

    first = module_registry.create("record")
    second = module_registry.create("record")

    assert isinstance(first, RecordingModule)
    assert first is not second
    assert module_registry.is_registered("record")
    assert module_registry.names() == ["record"]

    module_registry.unregister("record")
    assert not module_registry.is_registered("record")


def test_unknown_name_is_a_configuration_error(
    module_registry: ImplementationRegistry[PipelineModule],
) -> None:
    with pytest.raises(PipelineConfigurationError, match="No module registered for 'missing'"):
        module_registry.create("missing")


def test_module_paths_are_imported_on_demand(
    filter_registry: ImplementationRegistry[XmlFilter],
) -> None:
    instance = filter_registry.create("_support:MarkFilter")
    assert isinstance(instance, MarkFilter)


def test_unloadable_paths_are_reported(
    filter_registry: ImplementationRegistry[XmlFilter],
) -> None:
    with pytest.raises(PipelineConfigurationError, match="Unable to load filter"):
        filter_registry.create("_support:DoesNotExist")
    with pytest.raises(PipelineConfigurationError, match="Unable to load filter"):
        filter_registry.create("no_such_package_anywhere:Thing")


def test_factory_must_produce_base_type(
    filter_registry: ImplementationRegistry[XmlFilter],
) -> None:
    filter_registry.register("wrong", lambda: RecordingModule([]))
    with pytest.raises(PipelineConfigurationError, match="did not produce a XmlFilter"):
        filter_registry.create("wrong")


def test_load_attribute_requires_colon_format() -> None:
    with pytest.raises(ValueError, match="module:attribute"):
        load_attribute("os.path")
    assert load_attribute("os.path:join") is not None
