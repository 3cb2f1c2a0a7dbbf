"""
Command-line interface entry points for dsconv.

Entry points:
- dsconv: Scan C sources for array declarations, report and convert them
"""
