"""Report and configuration block rendering."""

from .blocks import render_prefork_block, render_worker_server_block
from .report import ReportPrinter, make_console

__all__ = [
    "ReportPrinter",
    "make_console",
    "render_prefork_block",
    "render_worker_server_block",
]
