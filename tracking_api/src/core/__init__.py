"""
Core application utilities for settings, logging, errors and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- The application context built once at startup (engine + session factory)
- Dependency helpers wiring repositories and services per request
"""
