import copy
import json
import logging
import numbers

from .bounds import Bounds
from .errors import ConfigError

logger = logging.getLogger(__name__)


## iteration

# logistic map
DEFAULT_FUNCTION = "2*x*(1-x)"

# initial value x0
DEFAULT_SEED = 0.1

# k of the k-fold iterate f^k
DEFAULT_K = 5

# predefined batch sizes, plus a custom one
BATCH_CHOICES = (1, 10, 100)
DEFAULT_CUSTOM_BATCH_SIZE = 1000

# redraw and refresh the table every that many steps while a batch runs
DEFAULT_REDRAW_INTERVAL = 20


## view

# graph dimensions when fully zoomed out
DEFAULT_FULL_ZOOM = (0.0, 1.0, 0.0, 1.0)

# half-size in pixels of the box a single wheel step zooms into
DEFAULT_SCROLL_ZOOM_MARGIN = 75

# points per curve when drawing f and f^k
DEFAULT_CURVE_SAMPLES = 512


DEFAULTS = {
    "function": DEFAULT_FUNCTION,
    "seed": DEFAULT_SEED,
    "k": DEFAULT_K,
    "kEnabled": False,
    "fullZoom": list(DEFAULT_FULL_ZOOM),
    "customBatchSize": DEFAULT_CUSTOM_BATCH_SIZE,
    "scrollZoomMargin": DEFAULT_SCROLL_ZOOM_MARGIN,
    "redrawInterval": DEFAULT_REDRAW_INTERVAL,
    "curveSamples": DEFAULT_CURVE_SAMPLES,
    "logLevel": "WARNING",
}


def _isReal(v):
    return isinstance(v, numbers.Real) and not isinstance(v, bool)


def _isPositiveInt(v):
    return isinstance(v, numbers.Integral) and not isinstance(v, bool) and v > 0


_VALIDATORS = {
    "function": (lambda v: isinstance(v, str) and v.strip() != "", "a non-empty string"),
    "seed": (_isReal, "a real number"),
    "k": (_isPositiveInt, "a positive integer"),
    "kEnabled": (lambda v: isinstance(v, bool), "a boolean"),
    "fullZoom": (lambda v: isinstance(v, (list, tuple)) and len(v) == 4 and all(map(_isReal, v)),
                 "a list [xMin, xMax, yMin, yMax]"),
    "customBatchSize": (_isPositiveInt, "a positive integer"),
    "scrollZoomMargin": (_isPositiveInt, "a positive integer"),
    "redrawInterval": (_isPositiveInt, "a positive integer"),
    "curveSamples": (lambda v: _isPositiveInt(v) and v >= 2, "an integer >= 2"),
    "logLevel": (lambda v: v in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"), "a logging level name"),
}


def validateConfig(config: dict) -> dict:
    unknown = set(config) - set(DEFAULTS)
    if unknown:
        raise ConfigError("Unknown configuration keys: {}".format(", ".join(sorted(unknown))))
    for key, value in config.items():
        check, expected = _VALIDATORS[key]
        if not check(value):
            raise ConfigError("Configuration key '{}' must be {}, got {!r}".format(key, expected, value))
    try:
        Bounds(*config.get("fullZoom", DEFAULT_FULL_ZOOM))
    except ValueError as e:
        raise ConfigError("Invalid fullZoom: {}".format(e)) from e
    return config


def loadConfig(path: str = None) -> dict:
    config = copy.deepcopy(DEFAULTS)
    if path is None:
        return config

    logger.info("Loading config from file: %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            loaded = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError("Cannot load configuration from file {}: {}".format(path, e)) from e

    if not isinstance(loaded, dict):
        raise ConfigError("Configuration file {} must contain a JSON object".format(path))

    config.update(validateConfig(loaded))
    logger.info("Loaded configuration: %s", config)
    return config


def fullZoomOf(config: dict) -> Bounds:
    return Bounds(*config["fullZoom"])
