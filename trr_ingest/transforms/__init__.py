"""
Transforms sub-package for trr-ingest.

Steps applied to the parsed row table before export:
  - amounts.py: Coerce amount strings to numbers, sign them by CR/DR.
  - dates.py: Convert TRR date strings to timezone-aware timestamps.
  - pipeline.py: Orchestrates the steps according to ``OutputConfig``.
"""
