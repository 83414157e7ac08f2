"""
Resources for dxf_viewer.

Provides access to the packaged stylesheets.
"""

from .style_manager import StyleManager, style_manager, apply_style_class

__all__ = ["StyleManager", "style_manager", "apply_style_class"]
