"""Synthesis constants.

Lengths are in inches; the synthesizer converts them for metric programs.
These are conservative starting points and can be overridden per
operation.
"""

# Z heights above the top of stock
CLEARANCE_Z = 0.5          # rapids between features
RETRACT_Z = 0.1            # canned-cycle R plane

# Drilling
THROUGH_DEPTH = 0.55       # through hole with no explicit depth
PECK_RATIO = 3.0           # depth/diameter above which we peck
PECK_DIAMETER_FACTOR = 1.5 # peck increment as a multiple of tool diameter
PECK_CLEARANCE = 0.05      # rapid-down stop above the previous peck

# Tapping
DEFAULT_TAP_RPM = 500

# Pocketing
POCKET_STEPDOWN_FACTOR = 0.5   # stepdown as a fraction of tool diameter
POCKET_STEPOVER = 0.4          # fraction of tool diameter
MIN_SPIRAL_CLEARANCE = 0.125   # smallest spiral radius worth cutting
SPIRAL_POINTS_PER_REV = 36

# Profiling
PROFILE_STEPDOWN = 0.1
PROFILE_ENGAGEMENT_PCT = 50.0

# Facing
FACE_STEPOVER = 0.75           # fraction of tool diameter

# Feeds used when no material or tool is known
PLUNGE_FEED_RATIO = 0.25
DEFAULT_FEED = 10.0            # IPM
