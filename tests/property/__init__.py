# tests/property/__init__.py
"""Property-based tests for portal-schema.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. Closures are what users read to
decide which columns a manifest needs, so completeness and determinism are
non-negotiable.

Test categories:
- core/: Closure completeness, exactly-once output, provenance, cycle safety
- views/: View state machine transitions
"""
