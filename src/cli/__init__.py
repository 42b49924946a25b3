# =============================================================================
# src/cli/__init__.py - CLI Module Overview
# =============================================================================
#
# Command-line access to the TasteGraph engine for operators and developers
# who want results without running the API server.
#
#   RECOMMEND (recommend.py)
#      Computes recommendations for a user from 1-3 seed artists and stores
#      them, or lists users sharing seed artists (--matches).
#
# Architecture Notes:
#   - argparse for argument parsing.
#   - src.main is imported inside the command so --json can quiet logging
#     before the application configures it.
# =============================================================================

"""CLI tools for TasteGraph.

- ``python -m src.cli.recommend`` - compute recommendations or matches.
"""
