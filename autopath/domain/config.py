# Simulation Configuration

# Grid Settings (default topology)
GRID_ROWS = 9
GRID_COLS = 9
SPACING_X_KM = 0.875
SPACING_Y_KM = 0.625
HIGHWAY_EVERY = 4
HIGHWAY_SPEED = 60.0
LOCAL_SPEED = 40.0
SPEED_LIMIT = 60.0

# Timing
TICK_SECONDS = 0.05          # Vehicle movement tick
ENVIRONMENT_INTERVAL = 1.5   # Seconds between environment updates

# Environment Dynamics
MIN_SPEED = 5.0              # km/h, floor for every edge
SPEED_NOISE = 15.0           # km/h, symmetric perturbation around base speed
SLOWDOWN_PROBABILITY = 0.05
SLOWDOWN_FACTOR = 0.2
LIGHT_FLIP_PROBABILITY = 0.3

# Planner Costs (minutes)
RED_LIGHT_PENALTY = 0.5
TURN_PENALTY = 0.15
HIGHWAY_LIMIT = 60.0         # Limit at or above which an edge counts as highway
HIGHWAY_FACTOR = 1.0
LOCAL_FACTOR = 1.2
FREE_FLOW_SPEED = 60.0       # km/h assumed by the heuristic
MIN_SPEED_EPSILON = 0.1

# Reroute Decision
PENALTY_WEIGHT = 1.5         # Switching cost in minutes
ACCEPTANCE_THRESHOLD = 0.2   # Minimum relative improvement
MIN_REMAINING_TIME = 0.1
MAX_PATH_CHANGES = 2

# Vehicle Movement
PROGRESS_SCALE = 0.1         # step = speed / length * tick * scale
STOP_THRESHOLD = 0.85        # Progress beyond which a red light holds the vehicle
MOVE_TIME_COST = 0.02        # Minutes accrued per moving tick
WAIT_TIME_COST = 0.05        # Minutes accrued per waiting tick

# Incidents
INCIDENT_SPEED = 2.0
INCIDENT_REASON = "Sudden accident"

# Decision Log
LOG_CAPACITY = 100
