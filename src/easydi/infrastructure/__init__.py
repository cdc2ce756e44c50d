"""
Infrastructure layer - Framework integrations and test helpers.

Depends on both the application and domain layers; nothing below imports from here.
"""

from easydi.infrastructure.fastapi_integration import (
    create_fastapi_dependency,
    from_app_container,
    install_container,
)
from easydi.infrastructure.testing import TestContainer, create_mock_container

__all__ = [
    # FastAPI
    "create_fastapi_dependency",
    "install_container",
    "from_app_container",
    # Testing
    "TestContainer",
    "create_mock_container",
]
