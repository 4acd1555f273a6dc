"""
Shared cross-cutting helpers: logging setup and the error hierarchy.
"""
