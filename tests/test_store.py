import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from thorn.store import ContentStore  # noqa: E402


def test_put_creates_root_and_overwrites(tmp_path):
    store = ContentStore(tmp_path / "root")

    path = store.put("abc", "first")
    assert path == tmp_path / "root" / "abc"
    assert path.read_text(encoding="utf-8") == "first\n"

    store.put("abc", "second\n")
    assert path.read_text(encoding="utf-8") == "second\n"


def test_put_tree_copies_directory(tmp_path):
    source = tmp_path / "pkg"
    (source / "lib").mkdir(parents=True)
    (source / "main.thorn").write_text("class Pkg(Tasks): pass\n", encoding="utf-8")
    (source / "lib" / "helpers.py").write_text("VALUE = 1\n", encoding="utf-8")
    store = ContentStore(tmp_path / "root")

    store.put_tree("tree", source)
    (source / "lib" / "helpers.py").unlink()
    store.put_tree("tree", source)

    assert (tmp_path / "root" / "tree" / "main.thorn").exists()
    assert not (tmp_path / "root" / "tree" / "lib" / "helpers.py").exists()


def test_remove_is_idempotent(tmp_path):
    store = ContentStore(tmp_path)
    store.put("file", "x")
    (tmp_path / "dir").mkdir()
    (tmp_path / "dir" / "main.thorn").write_text("x", encoding="utf-8")

    store.remove("file")
    store.remove("dir")
    store.remove("missing")

    assert list(tmp_path.iterdir()) == []


def test_list_objects_maps_directories_to_entry_point(tmp_path):
    store = ContentStore(tmp_path / "root")
    assert store.list_objects() == []

    store.put("b-file", "x")
    (tmp_path / "root" / "a-dir").mkdir()

    assert store.list_objects() == [
        tmp_path / "root" / "a-dir" / "main.thorn",
        tmp_path / "root" / "b-file",
    ]
