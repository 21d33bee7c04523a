"""
Package marker for source code under `src`.
It groups the datasource protocol core, the shared settings and logging helpers, and the HTTP adapter.
"""
