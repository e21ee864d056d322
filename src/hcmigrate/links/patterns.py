"""Pure text transforms that canonicalize article link targets.

A link target is canonical when its article part is just the numeric id,
e.g. ``360001234567.html``. Source exports carry a slug after the id
(``360001234567-How-to-ship.html``) and often an absolute host prefix.

Matching rules shared by every pattern here:

* the id is a run of ``min_digits``..``max_digits`` decimal digits that is
  not part of a longer digit run, so 8- or 15-digit numbers never qualify;
* the text before the id (``prefix``) is the shortest one that lets the
  rest match, so the first qualifying run in a token is the one kept;
* everything between the id and the ``.html`` suffix (``discarded``) is
  dropped.

Tokens never cross whitespace, quotes or tag brackets.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

DEFAULT_MIN_DIGITS = 9
DEFAULT_MAX_DIGITS = 14

_TOKEN_BREAKS = frozenset(" \t\r\n\f\v\"'<>")
_SEGMENT_CHARS = r"[^\s\"'<>/]"


@dataclass(frozen=True, slots=True)
class LinkMatch:
    """One matched link target split into its named parts."""

    prefix: str
    id: str
    discarded: str
    has_html_suffix: bool
    start: int
    end: int

    @property
    def canonical(self) -> str:
        """The rewritten target: prefix and id, plus ``.html`` when it had one."""

        return self.prefix + self.id + (".html" if self.has_html_suffix else "")


class LinkTargetMatcher:
    """Bounded digit-run matcher; the preserved prefix is never part of the regex match."""

    def __init__(self, min_digits: int = DEFAULT_MIN_DIGITS, max_digits: int = DEFAULT_MAX_DIGITS) -> None:
        if min_digits < 1 or max_digits < min_digits:
            raise ValueError("Digit bounds must satisfy 1 <= min_digits <= max_digits")
        self.min_digits = min_digits
        self.max_digits = max_digits

        digit_run = rf"(?<!\d)(?P<id>\d{{{min_digits},{max_digits}}})(?!\d)"
        self._html_re = re.compile(rf"{digit_run}(?P<discarded>{_SEGMENT_CHARS}*?)\.html")
        self._bare_re = re.compile(rf"{digit_run}(?P<discarded>-{_SEGMENT_CHARS}+)")
        self._href_re = re.compile(
            rf'(?P<open><a\b[^>]*?\shref=")(?P<prefix>[^"]*?){digit_run}'
            rf'(?P<discarded>[^"/]*?)\.html(?P<fragment>#[^"]*)?"',
            re.IGNORECASE,
        )

    def search(self, text: str) -> LinkMatch | None:
        """Return the earliest link target in *text*, or ``None``."""

        candidates = []
        html_match = self._html_re.search(text)
        if html_match:
            candidates.append(self._to_link_match(text, html_match, has_html_suffix=True))
        bare_match = self._bare_re.search(text)
        if bare_match:
            candidates.append(self._to_link_match(text, bare_match, has_html_suffix=False))
        if not candidates:
            return None
        return min(candidates, key=lambda match: (match.start, not match.has_html_suffix))

    def truncate(self, text: str) -> tuple[str, int]:
        """Drop slugs after ids in ``.html`` tokens, then in extensionless tokens."""

        changed = 0

        def _replace_html(match: re.Match[str]) -> str:
            nonlocal changed
            if match.group("discarded"):
                changed += 1
            return match.group("id") + ".html"

        def _replace_bare(match: re.Match[str]) -> str:
            nonlocal changed
            changed += 1
            return match.group("id")

        text = self._html_re.sub(_replace_html, text)
        text = self._bare_re.sub(_replace_bare, text)
        return text, changed

    def update_hrefs(self, html: str) -> tuple[str, int]:
        """Point ``<a href>`` targets at ``<id>.html``, leaving the rest of the tag alone."""

        changed = 0

        def _replace(match: re.Match[str]) -> str:
            nonlocal changed
            fragment = match.group("fragment") or ""
            rewritten = f'{match.group("open")}{match.group("id")}.html{fragment}"'
            if rewritten != match.group(0):
                changed += 1
            return rewritten

        return self._href_re.sub(_replace, html), changed

    def _to_link_match(self, text: str, match: re.Match[str], *, has_html_suffix: bool) -> LinkMatch:
        start = _token_start(text, match.start())
        return LinkMatch(
            prefix=text[start : match.start()],
            id=match.group("id"),
            discarded=match.group("discarded"),
            has_html_suffix=has_html_suffix,
            start=start,
            end=match.end(),
        )


def _token_start(text: str, index: int) -> int:
    while index > 0 and text[index - 1] not in _TOKEN_BREAKS:
        index -= 1
    return index


DEFAULT_MATCHER = LinkTargetMatcher()


def canonical_id(text: str, matcher: LinkTargetMatcher = DEFAULT_MATCHER) -> str | None:
    """Return the first qualifying id in *text*."""

    match = matcher.search(text)
    return match.id if match else None


def replace_host_prefix(content: str, old: str, new: str) -> tuple[str, int]:
    """Literal, case-sensitive replacement of every *old* occurrence."""

    if not old:
        return content, 0
    count = content.count(old)
    if count == 0:
        return content, 0
    return content.replace(old, new), count


def update_href_tags(content: str, matcher: LinkTargetMatcher = DEFAULT_MATCHER) -> tuple[str, int]:
    return matcher.update_hrefs(content)


def truncate_link_targets(content: str, matcher: LinkTargetMatcher = DEFAULT_MATCHER) -> tuple[str, int]:
    return matcher.truncate(content)
