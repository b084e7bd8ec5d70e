from .bounds import Bounds, CoordinatePair, PixelRect
from .errors import CobwebError, FormulaError, DomainError, NumberFormatError, IterationError, ConfigError
from .formula import Formula, kFoldText
from .sequence import IterateSequence, CobwebPath, SequenceSnapshot
from .zoom import ZoomStack, ZoomManager
from .engine import IterationEngine, IterationWorker, BatchResult
from .config import loadConfig, DEFAULTS
