from dataclasses import dataclass


@dataclass(frozen=True)
class KernelConfig:
    """
    Numeric defaults shared by the kernel:
      - epsilon: below this length a vector counts as zero
      - max_subdivide_depth: recursion cap of adaptive tessellation
      - fit_max_iterations: Newton reparameterization passes per fitted segment
      - curve_steps: uniform samples per chain span
      - hit_radius: pick radius used by PointChain.click (kernel units)
      - close_min_points: points an open chain needs before it can close
      - span_fit_tolerance: error allowed when a high-degree span is reduced to cubics
    """
    epsilon: float = 1e-12
    max_subdivide_depth: int = 16
    fit_max_iterations: int = 4
    curve_steps: int = 200
    hit_radius: float = 10.0
    close_min_points: int = 4
    span_fit_tolerance: float = 0.01


DEFAULT_CONFIG = KernelConfig()
