# cxsynth/__init__.py
import importlib.metadata

from .engine import Algorithm, SearchConfig, synthesize
from .gates import CX, MoveSet
from .result import SearchResult, SearchStatus
from .states import InputKind, LinearState, StabiliserState

__version__ = importlib.metadata.version("cxsynth")
