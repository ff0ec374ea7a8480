"""Unit tests for the SnapshotStore filesystem layer."""

import gzip

import pytest

from hltv.storage import SnapshotStore, read_html_file


class TestSaveAndLoad:
    """Tests for save/load of page snapshots."""

    def test_save_and_load_match(self, tmp_path):
        store = SnapshotStore(tmp_path)
        original = "<html><body>Match page</body></html>"
        store.save(original, kind="match", key=2346065)
        assert store.load("match", 2346065) == original

    def test_path_layout(self, tmp_path):
        store = SnapshotStore(tmp_path)
        path = store.save("<html></html>", kind="team", key=6665)
        assert path == tmp_path / "snapshots" / "team" / "6665.html.gz"

    def test_file_is_gzipped(self, tmp_path):
        store = SnapshotStore(tmp_path)
        path = store.save("<html>ø</html>", kind="results", key="all")
        assert gzip.decompress(path.read_bytes()).decode("utf-8") == "<html>ø</html>"

    def test_query_key_sanitized(self, tmp_path):
        store = SnapshotStore(tmp_path)
        path = store.save("<html></html>", kind="results", key="stars=1&matchType=Lan")
        assert path.name == "stars-1-matchType-Lan.html.gz"
        assert store.load("results", "stars=1&matchType=Lan") == "<html></html>"

    def test_overwrite(self, tmp_path):
        store = SnapshotStore(tmp_path)
        store.save("old", kind="upcoming", key="all")
        store.save("new", kind="upcoming", key="all")
        assert store.load("upcoming", "all") == "new"


class TestExists:

    def test_exists_true(self, tmp_path):
        store = SnapshotStore(tmp_path)
        store.save("<html></html>", kind="match", key=1)
        assert store.exists("match", 1) is True

    def test_exists_false(self, tmp_path):
        assert SnapshotStore(tmp_path).exists("match", 1) is False


class TestListSnapshots:

    def test_sorted(self, tmp_path):
        store = SnapshotStore(tmp_path)
        store.save("b", kind="match", key=2)
        store.save("a", kind="match", key=1)
        store.save("t", kind="team", key=3)
        assert [p.name for p in store.list_snapshots("match")] == ["1.html.gz", "2.html.gz"]

    def test_empty(self, tmp_path):
        assert SnapshotStore(tmp_path).list_snapshots("team") == []


class TestErrors:

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="match snapshot"):
            SnapshotStore(tmp_path).load("match", 99)

    @pytest.mark.parametrize("method", ["exists", "load", "list_snapshots"])
    def test_unknown_kind(self, tmp_path, method):
        store = SnapshotStore(tmp_path)
        args = ("player",) if method == "list_snapshots" else ("player", 1)
        with pytest.raises(ValueError, match="Unknown snapshot kind"):
            getattr(store, method)(*args)

    def test_unknown_kind_on_save(self, tmp_path):
        with pytest.raises(ValueError):
            SnapshotStore(tmp_path).save("x", kind="overview", key=1)

    def test_empty_key(self, tmp_path):
        with pytest.raises(ValueError, match="empty"):
            SnapshotStore(tmp_path).save("x", kind="match", key="../")


class TestReadHtmlFile:

    def test_plain(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("<p>hi</p>", encoding="utf-8")
        assert read_html_file(path) == "<p>hi</p>"

    def test_gzipped(self, tmp_path):
        path = tmp_path / "page.html.gz"
        path.write_bytes(gzip.compress("<p>hi</p>".encode("utf-8")))
        assert read_html_file(str(path)) == "<p>hi</p>"
