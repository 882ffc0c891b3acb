"""WarPlan HTTP API

Serves single-vector predictions, war simulations and allocation plans as JSON.

Usage:
    python -m warplan.gui.run

Then open http://localhost:8000/docs in your browser.
"""
