"""
AI Summary service.

Generates summaries for articles and product pages through an external LLM
provider and republishes them as JSON-LD:
- config: Environment-driven settings and logging setup
- summarization: Content preparation, providers, validation and the pipeline
- storage: Durable summary records and the best-effort cache tier
- publication: JSON-LD building/validation, inline fragments, robots rules
- api: FastAPI routers for public and admin surfaces
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
