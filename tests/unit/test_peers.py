"""Unit tests for peer matching."""

from build_audit.core.peers import match, normalize_local_path
from build_audit.models.package import BuildSide, PackageFile


class TestNormalizeLocalPath:
    """Tests for local path normalization."""

    def test_adds_leading_slash(self):
        """Test relative paths become absolute."""
        assert normalize_local_path("usr/bin/foo") == "/usr/bin/foo"

    def test_collapses_redundant_parts(self):
        """Test duplicate slashes and dot segments are removed."""
        assert normalize_local_path("//usr/./lib//libfoo.so") == "/usr/lib/libfoo.so"

    def test_strips_root(self):
        """Test an extraction root prefix is removed."""
        assert normalize_local_path("/tmp/x/after/usr/bin/foo", "/tmp/x/after") == "/usr/bin/foo"


class TestMatch:
    """Tests for match()."""

    def test_pairs_packages_and_files(self, make_package, make_build):
        """Test files with the same local path become peers."""
        before = make_build(make_package(["/usr/bin/foo", "/usr/share/doc/foo/README"]))
        after = make_build(make_package(["/usr/share/doc/foo/README", "/usr/bin/foo"]))

        peers = match(before, after)
        pkg = peers.get("foo")

        assert pkg is not None
        for entry in pkg.after_files:
            peer = pkg.peer_of(entry)
            assert peer is not None
            assert peer.local_path == entry.local_path
            assert peer.side == BuildSide.BEFORE

    def test_peer_links_are_symmetric(self, make_package, make_build):
        """Test following a peer link and back returns the original file."""
        before = make_build(make_package(["/a", "/b", "/c"]))
        after = make_build(make_package(["/c", "/d", "/a"]))

        pkg = match(before, after).get("foo")

        for side in (BuildSide.BEFORE, BuildSide.AFTER):
            for entry in pkg.files(side):
                peer = pkg.peer_of(entry)
                if peer is not None:
                    assert pkg.peer_of(peer) == entry

    def test_unmatched_files(self, make_package, make_build):
        """Test added and removed files have no peer."""
        before = make_build(make_package(["/usr/bin/old"]))
        after = make_build(make_package(["/usr/bin/new"]))

        pkg = match(before, after).get("foo")

        assert [f.local_path for f in pkg.added_files] == ["/usr/bin/new"]
        assert [f.local_path for f in pkg.removed_files] == ["/usr/bin/old"]

    def test_paths_are_normalized_before_matching(self, make_package, make_build):
        """Test differently spelled paths still pair up."""
        before = make_build(make_package(["usr/bin//foo"]))
        after = make_build(make_package(["/usr/bin/foo"]))

        pkg = match(before, after).get("foo")

        assert pkg.after_files[0].peer == 0
        assert pkg.before_files[0].local_path == "/usr/bin/foo"

    def test_package_order_and_one_sided_packages(self, make_package, make_build):
        """Test after-build order first, then packages only in the before build."""
        before = make_build(make_package(name="foo-old"), make_package(name="foo"))
        after = make_build(make_package(name="foo-devel"), make_package(name="foo"))

        peers = match(before, after)

        assert [p.name for p in peers.packages] == ["foo-devel", "foo", "foo-old"]
        assert peers.get("foo-devel").before_header is None
        assert peers.get("foo-old").after_header is None

    def test_no_before_build(self, make_package, make_build):
        """Test a new package has no peers at all."""
        peers = match(None, make_build(make_package(["/usr/bin/foo"])))

        pkg = peers.get("foo")
        assert pkg.before_header is None
        assert pkg.after_files[0].peer is None

    def test_duplicate_local_path_last_wins(self, make_package, make_build):
        """Test a duplicated path keeps only the last record."""
        first = PackageFile(local_path="/usr/bin/foo", owner="root")
        second = PackageFile(local_path="/usr/bin/foo", owner="foo")
        after = make_build(make_package([first, second]))

        pkg = match(None, after).get("foo")

        assert len(pkg.after_files) == 1
        assert pkg.after_files[0].file.owner == "foo"

    def test_duplicate_subpackage_last_wins(self, make_package, make_build):
        """Test a duplicated subpackage name keeps only the last one."""
        after = make_build(
            make_package(["/usr/bin/one"], version="1.0"),
            make_package(["/usr/bin/two"], version="2.0"),
        )

        peers = match(None, after)

        assert len(peers.packages) == 1
        assert peers.get("foo").after_header.version == "2.0"

    def test_after_files_walk(self, make_package, make_build):
        """Test walking all after files with their packages."""
        after = make_build(
            make_package(["/a"], name="foo"),
            make_package(["/b", "/c"], name="bar"),
        )

        walked = [(pkg.name, entry.local_path) for pkg, entry in match(None, after).after_files()]

        assert walked == [("foo", "/a"), ("bar", "/b"), ("bar", "/c")]

    def test_source_package_keyed_apart(self, make_package, make_build):
        """Test a source package does not replace the binary package of the same name."""
        after = make_build(
            make_package(["/usr/bin/foo"]),
            make_package(["foo-1.0.tar.gz"], arch="src"),
        )

        peers = match(None, after)

        assert [p.name for p in peers.packages] == ["foo", "foo"]
        assert [p.is_source for p in peers.packages] == [False, True]
        assert peers.get("foo").after_files[0].local_path == "/usr/bin/foo"
        assert peers.get("foo", is_source=True).after_files[0].local_path == "/foo-1.0.tar.gz"

    def test_before_only_source_package(self, make_package, make_build):
        """Test a source package that only exists before is still marked as source."""
        before = make_build(make_package(["foo-1.0.tar.gz"], arch="src"))

        peers = match(before, make_build())

        assert peers.get("foo") is None
        assert peers.get("foo", is_source=True).after_header is None
