# =============================================================================
# src/cli/__init__.py - CLI Module Overview
# =============================================================================
#
# Command-line tools that run the chart pipeline without the web server.
#
#   CHARTS (charts.py)
#      Legacy top charts, charts-v2 listings, free-text search and the chart
#      catalog, printed as a ranked listing or as the API's JSON body.
#
# Architecture Notes:
#   - argparse only, no Click/Typer.
#   - src.main is imported inside the runner so --quiet can reconfigure
#     logging before any logger is cached.
# =============================================================================

"""CLI tools for the chart aggregation API.

- ``python -m src.cli.charts`` - browse charts and search results.
"""
