"""
Backend package for the grant portal API.

This package provides a FastAPI application over a relational store of
countries, grants, applications and awards, with an in-memory backend for
local development and tests.
"""
