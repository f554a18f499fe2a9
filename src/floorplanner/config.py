"""Configuration defaults for the floor planner.

All lengths are in millimetres.
"""

from __future__ import annotations

from dataclasses import dataclass

# Reserved attachment targets
ZEROPOINT_ID = "zeropoint"
PARENT_ID = "parent"

# Anchor resolution
MAX_ITERATIONS = 20
EPSILON = 1e-6  # Tolerance for edge contact tests

# Viewport
BOUNDS_PADDING_RATIO = 0.1  # 10% of the larger dimension on every side
DEFAULT_VIEWPORT_SIZE = 10000.0  # 10m x 10m square at the origin
DEFAULT_GRID_STEP = 1000.0

# Doors, windows and objects
DOOR_THICKNESS = 100.0
WINDOW_THICKNESS = 100.0
DEFAULT_OBJECT_SIZE = 1000.0
DEFAULT_OBJECT_COLOR = "#888888"

# Policy values for optional checks
POLICY_IGNORE = "ignore"
POLICY_ADVISORY = "advisory"
POLICY_STRICT = "strict"
POLICIES = (POLICY_IGNORE, POLICY_ADVISORY, POLICY_STRICT)


@dataclass(frozen=True)
class ResolverConfig:
    """Tunables for a single resolution run.

    Attributes:
        max_iterations: Ceiling on fixed-point passes per entity list.
        origin_policy: What to do when no top-level room attaches to the
            origin: "ignore", "advisory" (warning record) or "strict"
            (error record).
        wall_fit_policy: Same values, applied to doors and windows whose
            offset + width runs past the end of their wall.
        normalize: Shift the resolved geometry so its top-left-most point
            sits at (0, 0).
        padding_ratio: Viewport padding as a fraction of the larger side.
    """

    max_iterations: int = MAX_ITERATIONS
    origin_policy: str = POLICY_ADVISORY
    wall_fit_policy: str = POLICY_IGNORE
    normalize: bool = False
    padding_ratio: float = BOUNDS_PADDING_RATIO

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        for name in ("origin_policy", "wall_fit_policy"):
            value = getattr(self, name)
            if value not in POLICIES:
                raise ValueError(f"{name} must be one of {POLICIES}, got {value!r}")
        if self.padding_ratio < 0:
            raise ValueError("padding_ratio must be non-negative")


DEFAULT_CONFIG = ResolverConfig()
