"""
board-metrics — reconstructs when each issue entered each stage of a
five-column project board and reports it as one CSV row per issue.

Packages:
    core        pure timeline reconstruction (no I/O)
    framework   issue source, record sink, notifier, logging, pipeline
    cli         typer command line
    api         FastAPI wrapper
"""

__version__ = "0.1.0"
