"""Shared fixtures: a small seeded record store and a source tree."""

import pytest

from refdoc.config import RefdocConfig
from refdoc.models import Record, Term
from refdoc.reference import ReferenceFactory
from refdoc.store import MemoryRecordStore

POST_TEMPLATE_PHP = """<?php

if ( ! function_exists( 'get_the_title' ) ) :
\tfunction get_the_title( $post = 0 ) {
\t\t$post = get_post( $post );
\t\treturn apply_filters( 'the_title', $post->post_title, $post->ID );
\t}
endif;
"""

SOURCE_FILE = Term(id=200, name="wp-includes/post-template.php",
                   slug="wp-includes-post-template-php", taxonomy="source-file")


def tag(name, content="", types=(), variable="", description=""):
    """Raw doc tag as stored by the parser."""
    return {
        "name": name,
        "content": content,
        "types": list(types),
        "variable": variable,
        "description": description,
    }


def seed_store(store=None) -> MemoryRecordStore:
    """
    Records:
        1  function get_the_title   uses get_post, the_title; used by get_post
        2  function get_post        uses get_the_title; used by get_the_title, WP_Query::query
        3  hook     the_title       fired by get_the_title, WP_Query::get_posts
        4  class    WP_Query        methods query, get_posts
        5  method   WP_Query::query      uses get_post, WP_Query::get_posts
        6  method   WP_Query::get_posts  fires the_title
        7  hook     {$context}_action    dynamic action
    """
    store = store if store is not None else MemoryRecordStore()
    store.add(Record(
        id=1,
        type="function",
        title="get_the_title",
        slug="get_the_title",
        excerpt="Retrieve post title.",
        content="Uses {@see get_post()} to load the post.",
        meta={
            "tags": [
                tag("param", "Optional. Post ID or WP_Post object. Default is global $post.",
                    ("int", "WP_Post"), "$post"),
                tag("return", "The post title.", ("string",)),
                tag("since", "0.71"),
                tag("since", "4.6.0", description="Added the `$post` parameter."),
            ],
            "args": [{"name": "$post", "default": "0"}],
            "line_num": 4,
            "end_line_num": 8,
        },
    ))
    store.add(Record(
        id=2,
        type="function",
        title="get_post",
        slug="get_post",
        excerpt="Retrieves post data.",
        meta={
            "tags": [
                tag("param", "Post ID or post object.", ("int", "WP_Post", "null"), "$post"),
                tag("param", "Optional. The required return type.", ("string",), "$output"),
                tag("param", "Type of filter to apply.", ("string",), "$filter"),
                tag("return", "Type corresponding to $output on success or null on failure.",
                    ("WP_Post", "array", "null")),
            ],
            "args": [
                {"name": "$post", "default": "null"},
                {"name": "$output", "default": "OBJECT"},
                {"name": "$filter", "default": "'raw'"},
            ],
        },
    ))
    store.add(Record(
        id=3,
        type="hook",
        title="the_title",
        slug="the_title",
        excerpt="Filters the post title.",
        meta={
            "tags": [
                tag("param", "The post title.", ("string",), "$post_title"),
                tag("param", "The post ID.", ("int",), "$post_id"),
            ],
            "hook_type": "filter",
        },
    ))
    store.add(Record(
        id=4,
        type="class",
        title="WP_Query",
        slug="wp_query",
        excerpt="The WordPress Query class.",
        meta={"tags": [tag("since", "1.5.0")], "line_num": 1, "end_line_num": 20},
    ))
    store.add(Record(
        id=5, type="method", title="WP_Query::query", slug="wp_query-query", parent=4,
        meta={"tags": [tag("return", "", ("void",))]},
    ))
    store.add(Record(
        id=6, type="method", title="WP_Query::get_posts", slug="wp_query-get_posts", parent=4,
    ))
    store.add(Record(
        id=7,
        type="hook",
        title="{$context}_action",
        slug="context_action",
        meta={
            "tags": [tag("param", "The context object.", ("object",), "$object")],
            "hook_type": "action_reference",
        },
    ))

    store.connect("functions_to_functions", 1, 2)
    store.connect("functions_to_hooks", 1, 3)
    store.connect("functions_to_functions", 2, 1)
    store.connect("methods_to_functions", 5, 2)
    store.connect("methods_to_methods", 5, 6)
    store.connect("methods_to_hooks", 6, 3)

    store.add_term(1, Term(id=100, name="0.71", slug="0-71", taxonomy="since"))
    store.add_term(1, Term(id=101, name="4.6.0", slug="4-6-0", taxonomy="since"))
    store.add_term(1, SOURCE_FILE)
    store.add_term(4, Term(id=102, name="1.5.0", slug="1-5-0", taxonomy="since"))
    store.add_term(4, SOURCE_FILE)
    return store


@pytest.fixture
def store():
    return seed_store()


@pytest.fixture
def make_store():
    """Seed any store instance with the standard records."""
    return seed_store


@pytest.fixture
def source_root(tmp_path):
    """Source tree with wp-includes/post-template.php."""
    root = tmp_path / "wordpress"
    (root / "wp-includes").mkdir(parents=True)
    (root / "wp-includes" / "post-template.php").write_text(POST_TEMPLATE_PHP, encoding="utf-8")
    return root


@pytest.fixture
def config(source_root):
    return RefdocConfig(source_root=str(source_root), cache_enabled=False)


@pytest.fixture
def factory(store, config):
    return ReferenceFactory(store, config)
