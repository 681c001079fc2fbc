"""
Tenant projects served by the API.

Each subpackage describes itself with a ``ProjectModule``; ``PROJECTS`` lists
the ones mounted by the application and handled by the sync CLI.
"""

from typing import List, Optional

from .base import ProjectModule
from .aihunar import project as aihunar_project
from .hsnweb import project as hsnweb_project

PROJECTS: List[ProjectModule] = [hsnweb_project, aihunar_project]


def get_project(name: str) -> Optional[ProjectModule]:
    """Look up a mounted project by name."""
    return next((project for project in PROJECTS if project.name == name), None)


__all__ = ["PROJECTS", "ProjectModule", "get_project"]
