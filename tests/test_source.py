"""Tests for reference/source.py and source code on references."""

import pytest

from refdoc.cache import SourceCache
from refdoc.config import RefdocConfig
from refdoc.models import Record
from refdoc.reference import ReferenceFactory, SourceExtractor

GET_THE_TITLE = (
    "function get_the_title( $post = 0 ) {\n"
    "\t$post = get_post( $post );\n"
    "\treturn apply_filters( 'the_title', $post->post_title, $post->ID );\n"
    "}\n"
)


@pytest.fixture
def extractor(source_root):
    return SourceExtractor(source_root)


class TestExtract:
    """Line range extraction."""

    def test_strips_indent_and_endif(self, extractor):
        assert extractor.extract("wp-includes/post-template.php", 4, 8) == GET_THE_TITLE

    def test_keeps_indent_when_disabled(self, source_root):
        extractor = SourceExtractor(source_root, strip_indent=False)
        code = extractor.extract("wp-includes/post-template.php", 4, 7)
        assert code.startswith("\tfunction get_the_title")
        assert code.endswith("\t}\n")

    def test_endif_only_dropped_on_last_line(self, extractor):
        code = extractor.extract("wp-includes/post-template.php", 3, 8)
        assert code.startswith("if ( ! function_exists")
        assert "endif;" not in code

    def test_single_line(self, extractor):
        assert extractor.extract("wp-includes/post-template.php", 1, 1) == "<?php\n"

    @pytest.mark.parametrize("start, end", [(0, 5), (6, 5), (-1, 2), (3, 0)])
    def test_invalid_range(self, extractor, start, end):
        assert extractor.extract("wp-includes/post-template.php", start, end) == ""

    def test_missing_file(self, extractor):
        assert extractor.extract("wp-includes/missing.php", 1, 3) == ""

    def test_empty_name(self, extractor):
        assert extractor.extract("", 1, 3) == ""

    def test_traversal_blocked(self, extractor, tmp_path):
        (tmp_path / "secret.php").write_text("<?php // secret\n")
        assert extractor.extract("../secret.php", 1, 1) == ""

    def test_leading_slash_stays_under_root(self, extractor):
        assert extractor.extract("/wp-includes/post-template.php", 1, 1) == "<?php\n"


class TestSourceCache:
    """Disk caching of extracted snippets."""

    def test_cached_until_forced(self, source_root, tmp_path):
        cache = SourceCache(cache_dir=str(tmp_path / "cache"), ttl_hours=1)
        extractor = SourceExtractor(source_root, cache=cache)
        path = extractor.root / "wp-includes" / "post-template.php"
        key = SourceCache.snippet_key(path, 1, 1, True)

        assert extractor.extract("wp-includes/post-template.php", 1, 1) == "<?php\n"
        cache.set(key, "cached\n")
        assert extractor.extract("wp-includes/post-template.php", 1, 1) == "cached\n"
        assert extractor.extract("wp-includes/post-template.php", 1, 1, force=True) == "<?php\n"
        assert cache.get(key) == "<?php\n"
        cache.close()

    def test_disabled_cache(self, tmp_path):
        cache = SourceCache(cache_dir=str(tmp_path / "cache"), enabled=False)
        cache.set("k", "v")
        assert cache.get("k") is None
        assert cache.stats() == {"enabled": False}

    def test_stats(self, tmp_path):
        cache = SourceCache(cache_dir=str(tmp_path / "cache"))
        cache.set("k", "v")
        stats = cache.stats()
        assert stats["enabled"] is True
        assert stats["size"] == 1
        cache.clear()
        assert cache.stats()["size"] == 0
        cache.close()

    def test_fetch_reads_once(self, tmp_path):
        target = tmp_path / "a.php"
        target.write_text("<?php\n")
        calls = []

        def read():
            calls.append(1)
            return "snippet\n"

        with SourceCache(cache_dir=str(tmp_path / "cache")) as cache:
            assert cache.fetch(target, 1, 1, True, read) == "snippet\n"
            assert cache.fetch(target, 1, 1, True, read) == "snippet\n"
            assert cache.fetch(target, 1, 1, True, read, force=True) == "snippet\n"
        assert len(calls) == 2

    def test_key_changes_with_file(self, tmp_path):
        target = tmp_path / "a.php"
        target.write_text("<?php\n")
        before = SourceCache.snippet_key(target, 1, 1, True)
        target.write_text("<?php\n// longer\n")
        assert SourceCache.snippet_key(target, 1, 1, True) != before
        assert SourceCache.snippet_key(target, 1, 1, False) != SourceCache.snippet_key(target, 1, 1, True)

    def test_invalidate_file(self, tmp_path):
        one = tmp_path / "one.php"
        two = tmp_path / "two.php"
        one.write_text("<?php\n")
        two.write_text("<?php\n")
        with SourceCache(cache_dir=str(tmp_path / "cache")) as cache:
            cache.fetch(one, 1, 1, True, lambda: "one\n")
            cache.fetch(two, 1, 1, True, lambda: "two\n")
            assert cache.invalidate(one) == 1
            assert cache.stats()["size"] == 1


class TestReferenceSource:
    """source_code() on references."""

    def test_function_source(self, factory):
        ref = factory.resolve(1)
        assert ref.has_source_code() is True
        assert ref.source_code() == GET_THE_TITLE

    def test_stored_source_preferred(self, factory, store):
        store.add(Record(id=61, type="function", title="stored",
                         meta={"source_code": "function stored() {}\n"}))
        assert factory.resolve(61).source_code() == "function stored() {}\n"

    def test_force_parse_ignores_stored(self, factory, store):
        record = store.get(1)
        store.add(Record(id=1, type=record.type, title=record.title, slug=record.slug,
                         meta={**record.meta, "source_code": "stale"}))
        ref = factory.resolve(1)
        assert ref.source_code() == "stale"
        assert ref.source_code(force_parse=True) == GET_THE_TITLE

    def test_record_not_modified(self, factory, store):
        factory.resolve(1).source_code()
        assert "source_code" not in store.get(1).meta

    def test_types_with_source_code(self, store, source_root):
        config = RefdocConfig(source_root=str(source_root), cache_enabled=False,
                              types_with_source_code=("class",))
        ref = ReferenceFactory(store, config).resolve(1)
        assert ref.has_source_code() is False
        assert ref.source_code() == ""

    def test_source_through_config_cache(self, store, source_root, tmp_path):
        config = RefdocConfig(source_root=str(source_root), cache_dir=str(tmp_path / "cache"))
        factory = ReferenceFactory(store, config)
        assert factory.resolve(1).source_code() == GET_THE_TITLE
        assert factory.source_extractor.cache.stats()["size"] == 1
        factory.source_extractor.cache.close()
