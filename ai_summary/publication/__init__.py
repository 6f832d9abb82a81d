"""Read-only publication of stored summaries: JSON-LD, HTML fragments and robots rules."""

from ai_summary.publication.fragment import parse_toggle, render_summary_fragment
from ai_summary.publication.jsonld import build_json_ld, is_valid_json_ld, validate_json_ld
from ai_summary.publication.robots import render_robots_txt

__all__ = [
    "build_json_ld",
    "is_valid_json_ld",
    "parse_toggle",
    "render_robots_txt",
    "render_summary_fragment",
    "validate_json_ld",
]
