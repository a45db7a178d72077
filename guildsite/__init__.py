"""
Backend package for the guild site.

This package provides a FastAPI application that relays a few Discord REST
calls and serves admin-editable site settings, so the public frontend never
sees the bot token or database credentials.
"""
