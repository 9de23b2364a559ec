"""
Application modules package.

This package contains all the feature modules of the application.
"""

# Import all models to ensure they are registered with SQLAlchemy
from app.modules.workspace.models import Member, Workspace

__all__ = ["Member", "Workspace"]
