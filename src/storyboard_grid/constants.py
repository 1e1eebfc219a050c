"""
Constants used internally by the storyboard grid engine.

These are implementation-level values that should not be overridden
via config files or CLI arguments.
"""

from types import MappingProxyType

# Canvas presets per resolution tier and aspect ratio, (width, height)
RESOLUTION_PRESETS = MappingProxyType({
    "2K": MappingProxyType({"16:9": (1920, 1080), "9:16": (1080, 1920)}),
    "4K": MappingProxyType({"16:9": (3840, 2160), "9:16": (2160, 3840)}),
})

# Maximum scene count a single composite may carry per tier
SCENE_LIMITS = MappingProxyType({"2K": 12, "4K": 48})

# Width:height components of each supported aspect ratio
ASPECT_COMPONENTS = MappingProxyType({"16:9": (16, 9), "9:16": (9, 16)})

# Adaptive detection
DETECTION_PROXY_WIDTH = 600
ENERGY_SAMPLE_STRIDE = 2
SEPARATOR_GREEN_MIN = 200
SEPARATOR_RED_BLUE_MAX = 100
SEPARATOR_RATIO = 0.3
SEGMENT_MAX_FRACTION = 0.02       # share of max energy
SEGMENT_MEAN_FRACTION = 0.3       # share of mean energy
SEGMENT_MIN_GAP_FRACTION = 0.005
SEGMENT_MIN_GAP_PX = 2
SEGMENT_MIN_SIZE_FRACTION = 0.03

# Aspect-ratio correction
ASPECT_TOLERANCE = 0.01

# Empty cell detection
EMPTY_SAMPLE_GRID = 10
NEAR_BLACK_MAX = 30
EMPTY_UNIFORM_RATIO = 0.9

# Edge margin cropping never shrinks a panel below this size
EDGE_CROP_MIN_PX = 50

# Internal color constants
COLOR_MODE_RGBA = "RGBA"
COLOR_BLACK = (0, 0, 0)
RGBA_CHANNELS = 4
