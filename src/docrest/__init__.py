"""
docrest: Serve document store collections as generic REST resources.
"""

from docrest.app import DocRest, create_app
from docrest.core.config import DocRestConfig
from docrest.db.registry import InstanceRegistry

__version__ = "0.1.0"

__all__ = ["DocRest", "DocRestConfig", "InstanceRegistry", "create_app", "__version__"]
