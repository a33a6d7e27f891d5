"""
Integration Tests Package

End-to-end harness for the analysis pipeline and the playback session.

TEST AXIOMS:
=============
1. Determinism: same records + same total lines = identical output
2. Single writer: only the current session's load may touch the index
3. Explicit failure: missing data and broken data are never confused
"""
