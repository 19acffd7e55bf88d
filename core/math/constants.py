"""
Mathematical constants and defaults for rate of turn estimation.
"""

import math

# Mathematical constants
PI = math.pi
TWO_PI = 2 * math.pi

# Conversion factors
RAD_TO_DEG = 180.0 / math.pi
MS_PER_SECOND = 1000.0

# Regression window
DEFAULT_WINDOW_SIZE = 10   # Samples kept in the regression window
MIN_WINDOW_SIZE = 2        # Slope is undefined below two points

# Signal K paths
PATH_HEADING_TRUE = "navigation.headingTrue"
PATH_HEADING_MAGNETIC = "navigation.headingMagnetic"
PATH_COG_TRUE = "navigation.courseOverGroundTrue"
PATH_COG_MAGNETIC = "navigation.courseOverGroundMagnetic"
PATH_RATE_OF_TURN = "navigation.rateOfTurn"

INPUT_PATHS = [
    PATH_HEADING_TRUE,
    PATH_HEADING_MAGNETIC,
    PATH_COG_MAGNETIC,
    PATH_COG_TRUE,
]
