"""
Top‑level package for the Lab Manager API.

This file makes ``lab_manager_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``lab_manager_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
