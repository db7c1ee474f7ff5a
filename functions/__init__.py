"""BlockPlane - Cloud Functions.

This package contains the Python Cloud Functions behind the BlockPlane
materials explorer: LIS/RIS/CPI scoring, cost-carbon comparison,
static and AI insight text, and CSV/PDF export.

Architecture:
- config: settings, secrets and error codes
- models: Pydantic records (materials, scores, insights, regions, filters)
- services: pure scoring/derivation functions plus provider and cache adapters
- main: HTTPS endpoints (insight, canonical_insight, compare)
"""

__version__ = "1.0.0"
