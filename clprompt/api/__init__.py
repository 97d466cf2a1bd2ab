"""
HTTP API for the workspace.
"""
