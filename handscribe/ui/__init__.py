"""Console rendering for Handscribe."""

from .history_view import render_record, render_history

__all__ = ["render_record", "render_history"]
