# acoustic_wsn/constants.py
import math

# acoustic channel
ALPHA_MAT = 3.21            # material coefficient of g(f, d)
EFF_ACOUS = 8.58e-3         # exponent applied to the angular frequency
ACOUS_FREQ = 1.0e6          # acoustic carrier [Hz]
MAX_ACOUS_DIST = 0.7        # [m]
MIN_ACOUS_DIST = 0.1        # dead zone [m]
EFF_PIEZO = 0.9
EFF_ACOUS2DC = 0.98
ACOUS_ENERGY_SEND = 12.0    # [J]
MAX_FAILS = 5

# super capacitor / sensing
SC_C = 3.0                  # [F]
SC_VMAX = 5.0
SC_VMIN = 3.5
SC_VCRITICAL = 3.3
SC_V_DEFAULT = 3.4
V_SENSE = 3.3
I_SENSE = 1.2e-3            # [A]
I_IDLE = 4e-6               # [A]
SENSE_CYCLE = 2e-3          # [s]
IDLE_CYCLE = 9.498          # [s]

WEIGHT_FULL = 10
WEIGHT_DEGRADED = 6
WEIGHT_LOW = 3

# planner
DEFAULT_POP_SIZE = 50
DEFAULT_GENERATIONS = 200
DEFAULT_CROSS_RATIO = 0.8
DEFAULT_MUTATION_RATE = 0.05
DEFAULT_FITNESS_WEIGHTS = (0.4, 0.4, 0.2)
MIN_REQUESTS = 4
STANDOFF_DIST = 0.2         # PDV to node distance while transferring [m]
PDV_MOVE_COST = 60.0        # [J/m]
PDV_ENERGY_BUDGET = 3000.0  # usable PDV energy per dispatch [J]
DEPOT = (0.0, 0.0)
SEED = 42
WORKERS = 1
LOG_INTERVAL = 20
FIT_CACHE_MAX_ENTRIES = 100_000
FIT_CACHE_DIGEST_BYTES = 8

TOLERANCE = 1e-9
TWO_PI = 2.0 * math.pi
