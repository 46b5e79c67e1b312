"""FastAPI application, settings and dashboard."""
