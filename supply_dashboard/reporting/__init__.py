"""
supply_dashboard.reporting — terminal formatting and flat-file export of
insight reports.

It does NOT produce new data; everything here consumes models returned by
``InsightService``.

Modules:
  formatters — ASCII summary / insight / stock tables for Typer CLI commands.
  export     — CSV/JSON writers for insight reports.
"""
