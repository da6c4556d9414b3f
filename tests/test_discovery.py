import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from thorn.discovery import Discoverer  # noqa: E402
from thorn.models import RegistryEntry  # noqa: E402
from thorn.registry import Registry  # noqa: E402
from thorn.store import ContentStore  # noqa: E402


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


def _discoverer(tmp_path, cwd):
    root = tmp_path / "home" / ".thorn"
    store = ContentStore(root)
    registry = Registry(root / "thorn.yml")
    return Discoverer(store, registry, cwd=cwd), store, registry


def test_ascension_stops_at_first_level_with_matches(tmp_path):
    grandparent = tmp_path / "mono"
    project = grandparent / "apps" / "web"
    cwd = project / "src" / "deep"
    cwd.mkdir(parents=True)
    _touch(grandparent / "Thornfile")
    local = _touch(project / "tasks" / "build.thorn")

    discoverer, _, _ = _discoverer(tmp_path, cwd)

    assert discoverer.project_files() == [local]


def test_all_four_patterns_are_tested_in_order(tmp_path):
    project = tmp_path / "project"
    expected = [
        _touch(project / "Thornfile"),
        _touch(project / "a.thorn"),
        _touch(project / "tasks" / "b.thorn"),
        _touch(project / "lib" / "tasks" / "c.thorn"),
    ]
    _touch(project / "tasks" / "notes.txt")
    _touch(project / "other" / "d.thorn")

    discoverer, _, _ = _discoverer(tmp_path, project)

    assert discoverer.project_files() == expected


def test_no_match_up_to_root_is_empty(tmp_path):
    cwd = tmp_path / "empty" / "dir"
    cwd.mkdir(parents=True)
    discoverer, _, _ = _discoverer(tmp_path, cwd)

    assert discoverer.project_files() == []


def test_system_files_come_first_and_skip_registry_file(tmp_path):
    project = tmp_path / "project"
    local = _touch(project / "Thornfile")
    discoverer, store, registry = _discoverer(tmp_path, project)
    store.put("installed-file", "x")
    (store.root / "installed-dir").mkdir()
    registry.save()

    assert discoverer.discover() == [
        store.root / "installed-dir" / "main.thorn",
        store.root / "installed-file",
        local,
    ]


def test_relevant_discovery_only_includes_matching_modules(tmp_path):
    project = tmp_path / "project"
    local = _touch(project / "Thornfile")
    discoverer, store, registry = _discoverer(tmp_path, project)
    store.put("deploy-id", "x")
    store.put("ops-id", "x")
    (store.root / "tree-id").mkdir()
    registry.set("deploy", RegistryEntry("deploy", "deploy-id", "/d.thorn", ["Deploy"]))
    registry.set("ops", RegistryEntry("ops", "ops-id", "/o.thorn", ["Ops"]))
    registry.set("tree", RegistryEntry("tree", "tree-id", "/tree", ["Deploy.Remote"]))

    assert discoverer.discover("Deploy") == [store.root / "deploy-id", local]
    assert discoverer.discover("Deploy.Remote") == [store.root / "tree-id" / "main.thorn", local]
    assert discoverer.discover("Missing") == [local]


def test_registry_file_swept_up_by_project_glob_is_excluded(tmp_path):
    root = tmp_path / "root"
    store = ContentStore(root)
    registry = Registry(root / "registry.thorn")
    registry.save()
    sibling = _touch(root / "other.thorn")
    discoverer = Discoverer(store, registry, cwd=root)

    assert discoverer.project_files() == [sibling, registry.path]
    assert discoverer.discover("Nothing") == [sibling]
    assert discoverer.discover() == [sibling, sibling]
