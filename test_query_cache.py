"""
Tests for the compiled-query cache.
"""

import threading

import pytest
from lxml import etree

from curse_parser.exceptions import CompileError
from curse_parser.query_cache import QueryCache, get_default_cache


class CountingCompiler:
    """Wraps lxml's compiler and records every selector it is asked to compile."""

    def __init__(self):
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, selector):
        with self._lock:
            self.calls.append(selector)
        return etree.XPath(selector)


def test_second_lookup_does_not_recompile():
    compiler = CountingCompiler()
    cache = QueryCache(compiler=compiler)

    first = cache.get_or_compile("//li")
    second = cache.get_or_compile("//li")

    assert first is second
    assert compiler.calls == ["//li"]


def test_selectors_are_keyed_by_exact_text():
    compiler = CountingCompiler()
    cache = QueryCache(compiler=compiler)

    cache.get_or_compile("//li")
    cache.get_or_compile("//li ")
    cache.get_or_compile("//LI")

    assert compiler.calls == ["//li", "//li ", "//LI"]
    assert len(cache) == 3


def test_compiled_query_evaluates():
    cache = QueryCache()
    root = etree.fromstring("<ul><li>a</li><li>b</li></ul>")
    assert [li.text for li in cache.get_or_compile("//li")(root)] == ["a", "b"]


def test_malformed_selector_raises_compile_error():
    cache = QueryCache()
    with pytest.raises(CompileError) as exc:
        cache.get_or_compile("//li[")
    assert exc.value.selector == "//li["
    assert "//li[" not in cache


def test_insert_is_trusted_without_verification():
    compiler = CountingCompiler()
    cache = QueryCache(compiler=compiler)
    other = etree.XPath("//p")

    cache.insert("//li", other)

    assert cache.get_or_compile("//li") is other
    assert compiler.calls == []


def test_clear_forces_recompilation():
    compiler = CountingCompiler()
    cache = QueryCache(compiler=compiler)
    cache.get_or_compile("//li")

    assert cache.clear() == 1
    assert len(cache) == 0

    cache.get_or_compile("//li")
    assert compiler.calls == ["//li", "//li"]


def test_concurrent_lookups_share_one_entry():
    cache = QueryCache(compiler=CountingCompiler())
    results = []
    results_lock = threading.Lock()
    start = threading.Barrier(8)

    def worker():
        start.wait()
        for _ in range(50):
            query = cache.get_or_compile("//div[@class='x']")
            with results_lock:
                results.append(query)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == 1
    assert len(results) == 400
    assert all(query is results[0] for query in results)


def test_instances_are_isolated():
    a = QueryCache()
    b = QueryCache()
    a.get_or_compile("//li")
    assert "//li" in a
    assert "//li" not in b


def test_default_cache_is_shared():
    assert get_default_cache() is get_default_cache()
