# config.py
# Stores all the "Magic Numbers" of the radial map. If you want to change the
# ellipse proportions, the wander distance, timings or default colors,
# you do it here without touching the layout or animation code.

# --- Viewport ---
DEFAULT_VIEWPORT = (1000, 800)
MIN_VIEWPORT_SIZE = 1
RESIZE_DEBOUNCE_MS = 150

# --- Area Ellipse ---
# Areas sit on an ellipse shifted left of the surface center
AREA_CENTER_OFFSET_X = -100
AREA_RADIUS_RATIO_X = 0.25
AREA_RADIUS_RATIO_Y = 0.25

# --- Projects ---
PROJECT_BASE_RADIUS_RATIO = 0.06   # of the viewport width
PROJECT_DISTANCE_RATIO = 0.5       # of the area x-radius
SIZE_FACTOR_BASE = 0.7             # 2 members -> 0.7
SIZE_FACTOR_STEP = 0.1             # +0.1 per extra member (5 members -> 1.0)
SIZE_FACTOR_REFERENCE_COUNT = 2
SIZE_FACTOR_FLOOR = 0.1

# --- Members ---
MEMBER_ANGLE_JITTER = 0.3          # radians, upper bound (exclusive)
MEMBER_RADIAL_JITTER = 0.3         # fraction of project radius, upper bound (exclusive)

# --- Rings ---
# A one-member project gets no ring connection unless this is True
RING_SELF_LOOPS = False

# --- Floating Animation ---
MAX_WANDER_RATIO = 0.4             # of the project radius
PULLBACK_RATIO = 0.8               # of the max wander distance
WANDER_RATIO = 0.3                 # of the max wander distance
STEP_DURATION_MS = 3000
MAX_START_DELAY_MS = 3000
FRAME_INTERVAL_MS = 33

# --- Styles ---
AREA_COLORS = ["#ff6b6b", "#4ecdc4", "#ffd166"]
PROJECT_COLOR_STEP = 20
AREA_FILL = "#f8f9fa"
AREA_FALLBACK_STROKE = "#e2e8f0"
AREA_LABEL_COLOR = "#334155"
PROJECT_LABEL_COLOR = "#1e293b"
COUNT_LABEL_COLOR = "#475569"
MEMBER_LABEL_COLOR = "#475569"
MEMBER_FILL = "white"
LINK_FALLBACK_COLOR = "#94a3b8"
CANVAS_BACKGROUND = "#f8fafc"

# --- Sizes (pixels) ---
LEAD_MEMBER_RADIUS = 30
MEMBER_RADIUS = 24
LEAD_AVATAR_SIZE = 50
AVATAR_SIZE = 40
AREA_FONT_SIZE = 24
PROJECT_FONT_SIZE = 14
COUNT_FONT_SIZE = 12
MEMBER_FONT_SIZE = 16
MEMBER_LABEL_OFFSET = 40
LINK_WIDTH = 1.5

# --- Data ---
DEFAULT_AVATAR = "img/user-round.png"
COUNT_LABEL_FORMAT = "({count} members)"
