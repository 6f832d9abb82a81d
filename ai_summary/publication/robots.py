"""
robots.txt rules allowing AI crawlers to read the summary endpoints.
"""

from __future__ import annotations

AI_CRAWLERS = ("GPTBot", "Google-Extended", "PerplexityBot")

DEFAULT_ROBOTS = "User-agent: *\nDisallow:\n"


def ai_crawler_rules(api_prefix: str = "/ai/v1/") -> str:
    agents = "".join(f"User-agent: {agent}\n" for agent in AI_CRAWLERS)
    return (
        "\n# AI Summary Plugin Rules\n"
        f"{agents}"
        "Allow: /*/ai-summary/\n"
        f"Allow: {api_prefix}\n"
        "\n"
    )


def render_robots_txt(base: str = DEFAULT_ROBOTS, *, enabled: bool = True, public: bool = True) -> str:
    """Append the crawler rules when integration is enabled on a public site."""
    if not enabled or not public:
        return base
    return base + ai_crawler_rules()
