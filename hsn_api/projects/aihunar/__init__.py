"""AI Hunar project. Endpoints only; its database is configured but not bootstrapped."""

from ..base import ProjectModule
from .routes import router

PROJECT_NAME = "aihunar"

project = ProjectModule(name=PROJECT_NAME, router=router, auto_init=False)

__all__ = ["PROJECT_NAME", "project", "router"]
