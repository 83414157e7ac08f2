"""
dxf_viewer: Embeddable Qt widget for DXF drawings

Hosts an external DXF rendering engine and provides asynchronous loading
with progress feedback, error reporting, pointer coordinate readout and
engine event relaying.
"""

__version__ = "0.1.0"
__author__ = "dxf_viewer Contributors"

from .models import (
    LoadState, ProgressPhase, CameraBounds, PointerCoordinate, ProgressEvent
)
from .engine import DxfEngine, EngineOptions, EngineFactory, WorkerFactory
from .progress import ProgressAggregator
from .coord_transformer import CoordinateMapper
from .event_relay import EventRelay, RELAYED_EVENTS, EVENT_PREFIX
from .load_controller import LoadController, ViewerError
from .gui import DxfViewerWidget
from .utils.logging_config import setup_logging

__all__ = [
    # Widget
    'DxfViewerWidget',

    # Controllers
    'LoadController',
    'ProgressAggregator',
    'CoordinateMapper',
    'EventRelay',
    'RELAYED_EVENTS',
    'EVENT_PREFIX',

    # Engine contract
    'DxfEngine',
    'EngineOptions',
    'EngineFactory',
    'WorkerFactory',

    # Data models
    'LoadState',
    'ProgressPhase',
    'CameraBounds',
    'PointerCoordinate',
    'ProgressEvent',

    # Errors and logging
    'ViewerError',
    'setup_logging',
]
