"""Tests for wren.paths — normalization, location matching, extensions."""

import pytest

from wren.paths import (
    file_extension,
    join_url,
    match_location,
    normalize_path,
    split_segments,
    strip_extension,
)


class TestNormalizePath:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, "/"),
            ("/", "/"),
            ("", "/"),
            ("///", "/"),
            ("blog", "blog"),
            ("/blog", "blog"),
            ("blog/", "blog"),
            ("//blog/post//", "blog/post"),
            ("a//b", "a//b"),
        ],
    )
    def test_strips_outer_separators(self, raw, expected) -> None:
        assert normalize_path(raw) == expected

    @pytest.mark.parametrize("raw", [None, "/", "", "//x//", "a/b/", "/docs/guide"])
    def test_idempotent(self, raw) -> None:
        once = normalize_path(raw)
        assert normalize_path(once) == once

    @pytest.mark.parametrize("raw", ["/x/", "//a/b//", "plain", "/", "////"])
    def test_no_outer_separator_unless_root(self, raw) -> None:
        result = normalize_path(raw)
        if result != "/":
            assert not result.startswith("/")
            assert not result.endswith("/")


class TestMatchLocation:
    def test_root_location_matches_everything_unchanged(self) -> None:
        assert match_location("/anything/at/all/", "/") == "/anything/at/all/"
        assert match_location("/", "/") == "/"

    def test_prefix_match_strips_location(self) -> None:
        assert match_location("/blog/post1", "blog") == "post1"

    def test_exact_location_is_root(self) -> None:
        assert match_location("/blog", "blog") == "/"
        assert match_location("/blog/", "blog") == "/"

    def test_partial_segment_does_not_match(self) -> None:
        assert match_location("/blogger", "blog") is None
        assert match_location("/documentation", "docs") is None

    def test_unrelated_path_does_not_match(self) -> None:
        assert match_location("/about", "blog") is None
        assert match_location("/", "blog") is None

    def test_multi_segment_location(self) -> None:
        assert match_location("/docs/v2/intro", "docs/v2") == "intro"
        assert match_location("/docs/v20/intro", "docs/v2") is None

    def test_nested_local_path(self) -> None:
        assert match_location("/blog/2024/post.html", "blog") == "2024/post.html"

    def test_repeated_separators_are_ignored(self) -> None:
        assert match_location("//blog//post1", "blog") == "post1"


class TestExtensions:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("about.html", "html"),
            ("css/site.CSS", "css"),
            ("secret.env", "env"),
            (".env", "env"),
            ("about", None),
            ("v1.2/readme", None),
            ("archive.", None),
            ("a/b.tar.gz", "gz"),
        ],
    )
    def test_file_extension(self, path, expected) -> None:
        assert file_extension(path) == expected

    def test_strip_extension(self) -> None:
        assert strip_extension("about.html") == "about"
        assert strip_extension("docs/guide.html") == "docs/guide"
        assert strip_extension("v1.2/readme") == "v1.2/readme"
        assert strip_extension("index.html") == "index"


class TestJoinUrl:
    def test_root_location(self) -> None:
        assert join_url("/", "about") == "/about"
        assert join_url("/") == "/"
        assert join_url("/", "/") == "/"

    def test_scoped_location(self) -> None:
        assert join_url("blog", "post1") == "/blog/post1"
        assert join_url("blog") == "/blog"

    def test_split_segments(self) -> None:
        assert split_segments("//a/b//c/") == ("a", "b", "c")
        assert split_segments("/") == ()
