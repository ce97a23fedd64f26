"""
Version 1 of the API.

This subpackage bundles all endpoints for the first version of the
Lab Manager API.
"""
