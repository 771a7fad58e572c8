# -----------------------
# Electrostatics / non-bonded interactions
# -----------------------
K_COULOMB = 350.0             # reduced Coulomb prefactor
LJ_EPSILON = 5.0              # depth of LJ well
LJ_SIGMA_SCALE = 0.85         # factor applied to sum of radii to get sigma
MIN_PAIR_DISTANCE = 0.1       # pairs closer than this are skipped
LORENTZ_SCALE = 2.0           # q (v x B) prefactor
COHESION_STRENGTH = 15.0      # intermolecular attraction, F = -C / r^2
COHESION_CUTOFF = 4.0

# -----------------------
# Container / integration
# -----------------------
CONTAINER_SIZE = 25.0         # half-extent of the box on every axis
PROXIMITY_LIMIT = 15.0        # spawn points are pulled within this of the nearest atom
SPAWN_MARGIN = 2.0
DAMPING = 0.98
BOUNDARY_RESTITUTION = 0.5
MAX_FRAME_DT = 0.05           # external frame delta clamp (simulated seconds)

# phase regime -> (damping, noise scale)
PHASE_REGIMES = {
    "solid": (0.90, 5.0),
    "liquid": (DAMPING, 15.0),
    "gas": (0.99, 30.0),
}
PLASMA_TEMPERATURE = 20.0
DEFAULT_TEMPERATURE = 3.0

# -----------------------
# Bonds
# -----------------------
BOND_STRENGTH_COVALENT = 1200.0
BOND_STRENGTH_IONIC = 800.0
BOND_BREAK_RATIO = 2.0        # mechanical snap when stretched past rest * ratio
THERMAL_EXPANSION_COEFF = 0.005
THERMAL_ENERGY_SCALE = 150.0
DISSOCIATION_THRESHOLD = 0.8  # fraction of bond energy before dissociation can occur
DISSOCIATION_COEFF = 0.00005
STIFFNESS_ORDER_EXPONENT = 1.2
BOND_REST_LENGTH_MULTIPLIERS = {1: 0.75, 2: 0.65, 3: 0.60}
BOND_TYPES = ("covalent", "ionic", "metallic")

# -----------------------
# Chemistry engine
# -----------------------
BOND_FORM_RADIUS = 1.3        # formation radius multiplier on sum of radii
IONIC_EN_THRESHOLD = 1.7
POLAR_EN_THRESHOLD = 0.4
COVALENT_MELT_FACTOR = 1.5
CHEMISTRY_INTERVAL = 0.2      # seconds between formation passes

# -----------------------
# Photons
# -----------------------
PHOTON_SPEED = 15.0
PHOTON_HIT_RADIUS = 0.8
PHOTON_IMPULSE_SCALE = 500.0
PHOTON_MAX_RADIUS = 60.0
PHOTON_DEFAULT_ENERGY = 5.0

# -----------------------
# Tools
# -----------------------
VORTEX_MIN_DISTANCE = 1.0
VORTEX_ATTRACTION = 100.0
VORTEX_SWIRL = 20.0
LIGHTNING_RADIUS = 8.0
LIGHTNING_KICK = 10.0
LIGHTNING_HEAT = 0.5
BLAST_RADIUS = 15.0
BLAST_IMPULSE = 40.0

# -----------------------
# Field sampling
# -----------------------
FIELD_GRID_SIZE = 20
FIELD_MIN_R2 = 0.1
FIELD_MIN_MAGNITUDE = 0.001

# -----------------------
# Logging
# -----------------------
LOGGING_LEVEL = "INFO"  # options: DEBUG, INFO, WARNING, ERROR

# -----------------------
# Misc
# -----------------------
EPSILON = 1e-12  # small value to prevent div by zero
