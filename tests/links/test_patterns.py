from __future__ import annotations

import pytest

from hcmigrate.links.patterns import (
    LinkTargetMatcher,
    canonical_id,
    replace_host_prefix,
    truncate_link_targets,
    update_href_tags,
)

OLD = "https://old-host/hc/en-us/articles/"
NEW = "/hc/es/articles/"


def test_update_href_drops_prefix_and_slug() -> None:
    updated, count = update_href_tags('<a href="/path/987654321-slug.html">')

    assert updated == '<a href="987654321.html">'
    assert count == 1


def test_update_href_leaves_surrounding_markup_untouched() -> None:
    html = (
        '<p>See <a class="link" href="https://h/hc/articles/360001234567-How-To.html" target="_blank">'
        "How to</a> and <a href='x'>other</a>.</p>"
    )

    updated, count = update_href_tags(html)

    assert updated == (
        '<p>See <a class="link" href="360001234567.html" target="_blank">'
        "How to</a> and <a href='x'>other</a>.</p>"
    )
    assert count == 1


def test_update_href_keeps_fragment() -> None:
    updated, _ = update_href_tags('<a href="/hc/articles/360001234567-Returns.html#refunds">')

    assert updated == '<a href="360001234567.html#refunds">'


def test_update_href_only_rewrites_anchor_tags() -> None:
    html = '<link href="/hc/articles/360001234567-Style.html"><a data-href="/x/360001234567-a.html">'

    updated, count = update_href_tags(html)

    assert updated == html
    assert count == 0


@pytest.mark.parametrize(
    "href",
    [
        "/articles/12345678-short.html",
        "/articles/1234567890123456-long.html",
        "/articles/123456789/page.html",
        "/articles/no-id-here.html",
    ],
)
def test_update_href_ignores_targets_without_canonical_id(href: str) -> None:
    html = f'<a href="{href}">x</a>'

    updated, count = update_href_tags(html)

    assert updated == html
    assert count == 0


def test_host_prefix_replacement_is_literal_and_idempotent() -> None:
    content = f'<a href="{OLD}1-a">x</a> <a href="{OLD}2-b">y</a> {OLD.upper()}'

    once, first_count = replace_host_prefix(content, OLD, NEW)
    twice, second_count = replace_host_prefix(once, OLD, NEW)

    assert once == f'<a href="{NEW}1-a">x</a> <a href="{NEW}2-b">y</a> {OLD.upper()}'
    assert first_count == 2
    assert twice == once
    assert second_count == 0


def test_truncate_html_tokens_keeps_prefix() -> None:
    updated, count = truncate_link_targets("see /hc/articles/360001234567-How-to.html now")

    assert updated == "see /hc/articles/360001234567.html now"
    assert count == 1


def test_truncate_extensionless_tokens_stops_at_markup() -> None:
    updated, count = truncate_link_targets('<a href="/hc/es/articles/360001234567-How-to">How to</a>')

    assert updated == '<a href="/hc/es/articles/360001234567">How to</a>'
    assert count == 1


@pytest.mark.parametrize(
    "text",
    [
        "12345678-x.html",
        "1234567890123456-x.html",
        "release 2024-01-01 notes",
        "360001234567.html",
        "no digits at all",
    ],
)
def test_truncate_leaves_non_matching_text_unchanged(text: str) -> None:
    assert truncate_link_targets(text) == (text, 0)


def test_truncate_prefers_first_qualifying_run() -> None:
    updated, _ = truncate_link_targets("111111111-a-222222222-b.html")

    assert updated == "111111111.html"


def test_truncate_is_idempotent_on_its_output() -> None:
    source = "a /x/360001234567-Slug.html b https://h/articles/360007654321-Other c"

    once, _ = truncate_link_targets(source)
    twice, count = truncate_link_targets(once)

    assert once == "a /x/360001234567.html b https://h/articles/360007654321 c"
    assert twice == once
    assert count == 0


def test_matcher_exposes_named_parts() -> None:
    match = LinkTargetMatcher().search("go to docs/987654321-slug.html today")

    assert match is not None
    assert match.prefix == "docs/"
    assert match.id == "987654321"
    assert match.discarded == "-slug"
    assert match.has_html_suffix is True
    assert match.start == 6
    assert match.canonical == "docs/987654321.html"


def test_matcher_extensionless_match() -> None:
    match = LinkTargetMatcher().search("https://h/articles/360007654321-Other")

    assert match is not None
    assert match.prefix == "https://h/articles/"
    assert match.discarded == "-Other"
    assert match.has_html_suffix is False
    assert match.canonical == "https://h/articles/360007654321"


def test_canonical_id_bounds() -> None:
    assert canonical_id("123456789-x.html") == "123456789"
    assert canonical_id("12345678901234-x.html") == "12345678901234"
    assert canonical_id("12345678-x.html") is None
    assert canonical_id("123456789012345-x.html") is None


def test_matcher_custom_bounds() -> None:
    matcher = LinkTargetMatcher(min_digits=4, max_digits=6)

    assert canonical_id("page-1234-x.html", matcher) == "1234"
    assert canonical_id("page-1234567-x.html", matcher) is None

    with pytest.raises(ValueError):
        LinkTargetMatcher(min_digits=10, max_digits=9)
