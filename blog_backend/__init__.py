"""
Backend package for the blog API.

This package provides a FastAPI application for user signup/signin and
per-user blog entries, backed by MongoDB with an in-memory store for
development and tests.
"""
