"""Link canonicalization transforms and the rewrite stage."""

from .patterns import (
    LinkMatch,
    LinkTargetMatcher,
    canonical_id,
    replace_host_prefix,
    truncate_link_targets,
    update_href_tags,
)
from .rewriter import FileRewrite, RewriteReport, rewrite_content, rewrite_links

__all__ = [
    "FileRewrite",
    "LinkMatch",
    "LinkTargetMatcher",
    "RewriteReport",
    "canonical_id",
    "replace_host_prefix",
    "rewrite_content",
    "rewrite_links",
    "truncate_link_targets",
    "update_href_tags",
]
