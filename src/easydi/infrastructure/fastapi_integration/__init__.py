"""
FastAPI integration module.

Provides helpers and utilities for integrating easydi with FastAPI.
"""

from .integration import create_fastapi_dependency, from_app_container, install_container

__all__ = [
    "create_fastapi_dependency",
    "install_container",
    "from_app_container",
]
