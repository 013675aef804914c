"""
DocDB core test suite.

This package contains:
- unit/: Unit tests per component (no external dependencies)
- integration/: Write/read path across components
"""
