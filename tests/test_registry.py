import pathlib
import sys

import pytest
import yaml

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from thorn.errors import RegistryError  # noqa: E402
from thorn.models import RegistryEntry  # noqa: E402
from thorn.registry import Registry  # noqa: E402


def _entry(alias, *namespaces, location="/src/file.thorn"):
    return RegistryEntry(alias=alias, stored_id=f"id-{alias}", location=location, namespace_ids=list(namespaces))


def test_missing_file_loads_empty(tmp_path):
    registry = Registry(tmp_path / "nowhere" / "thorn.yml").load()
    assert len(registry) == 0
    assert registry.get("anything") is None


def test_save_writes_on_disk_shape(tmp_path):
    path = tmp_path / "root" / "thorn.yml"
    registry = Registry(path)
    registry.set("deploy", _entry("deploy", "Deploy", "Deploy.Remote"))
    registry.save()

    payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert payload == {
        "deploy": {
            "filename": "id-deploy",
            "location": "/src/file.thorn",
            "constants": ["Deploy", "Deploy.Remote"],
        }
    }


def test_round_trip_through_new_instance(tmp_path):
    path = tmp_path / "thorn.yml"
    registry = Registry(path)
    registry.set("a", _entry("a", "A"))
    registry.set("b", _entry("b", location="tasks/b.thorn"))
    registry.save()
    registry.delete("a")
    registry.save()

    reloaded = Registry(path)
    assert list(reloaded) == ["b"]
    assert reloaded.get("b").is_relative
    assert not _entry("c", location="https://example.com/c.thorn").is_relative


def test_relevant_to(tmp_path):
    registry = Registry(tmp_path / "thorn.yml")
    registry.set("deploy", _entry("deploy", "Deploy", "Ops"))
    registry.set("ops", _entry("ops", "Ops"))
    registry.set("bare", _entry("bare"))

    assert [entry.alias for entry in registry.relevant_to("Ops")] == ["deploy", "ops"]
    assert [entry.alias for entry in registry.relevant_to("Deploy")] == ["deploy"]
    assert registry.relevant_to("Missing") == []


def test_relevant_to_compares_task_paths(tmp_path):
    registry = Registry(tmp_path / "thorn.yml")
    registry.set("ci", _entry("ci", "CI"))
    registry.set("deploy", _entry("deploy", "My_Deploy", "Ops.DB"))

    assert [entry.alias for entry in registry.relevant_to("Ci")] == ["ci"]
    assert [entry.alias for entry in registry.relevant_to("MyDeploy")] == ["deploy"]
    assert [entry.alias for entry in registry.relevant_to("Ops.Db")] == ["deploy"]


def test_reads_existing_file_with_missing_fields(tmp_path):
    path = tmp_path / "thorn.yml"
    path.write_text("legacy:\n  filename: abc\n", encoding="utf-8")

    entry = Registry(path).get("legacy")
    assert entry.stored_id == "abc"
    assert entry.location == ""
    assert entry.namespace_ids == []


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "broken: {filename\n",
        "alias:\n  location: /x\n",
        "alias:\n  filename: abc\n  constants: {A: 1}\n",
    ],
)
def test_malformed_file_raises(tmp_path, content):
    path = tmp_path / "thorn.yml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(RegistryError):
        Registry(path).load()
