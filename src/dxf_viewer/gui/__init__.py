"""Qt widgets for the DXF viewer.

- DxfViewerWidget: Embeddable widget hosting the rendering engine
- ViewerOverlay: Progress, error and coordinate overlay
"""

from .viewer_widget import DxfViewerWidget
from .overlay import ViewerOverlay

__all__ = [
    "DxfViewerWidget",
    "ViewerOverlay",
]
