"""Shared default values for user-facing configuration settings."""
from storyboard_grid.type_defs import AspectRatio, ResolutionTier, StrategyName

# Grid
DEFAULT_ASPECT_RATIO: AspectRatio = "16:9"
DEFAULT_RESOLUTION: ResolutionTier = "2K"
DEFAULT_SCENE_COUNT = 9

# Splitting
DEFAULT_THRESHOLD = 30            # summed RGB distance, 0-765
DEFAULT_FILTER_EMPTY = True
DEFAULT_EDGE_MARGIN_PERCENT = 0.005
MAX_EDGE_MARGIN_PERCENT = 0.25
DEFAULT_STRATEGY: StrategyName = "fixed"

# Border trimming and edge cropping utilities
DEFAULT_TRIM_THRESHOLD = 30
DEFAULT_EDGE_CROP_PERCENT = 0.03

# Prompt
DEFAULT_STYLE_PRESET = "ghibli"

# Output
DEFAULT_OUTPUT_DIR = "panels"
