from .model import (
    BUILTIN_KINDS,
    Constraint,
    ConstraintAssemblyError,
    EquationGradientMismatch,
    GeoSketchError,
    GradientArityMismatch,
    IndexOutOfRange,
    LinearSystemError,
    RelaxOptions,
    RelaxResult,
    StepReport,
    UnknownConstraintKind,
)
from .points import PointStore
from .constraints import (
    colinear,
    distance,
    evaluate,
    fixed_x,
    fixed_y,
    horizontal,
    register_evaluator,
    unregister_evaluator,
    vertical,
)
from .assembler import assemble, objective, residual_breakdown
from .linalg import gauss_seidel
from .relax import gauss_newton_step, relax, relaxation_step, solve_least_squares
from .system import GeometricSystem
from .config import RelaxationConfig, get_relaxation_config, set_relaxation_config
from .utils import normalize_point_coords
from .scenarios import SCENARIOS

__all__ = [
    'BUILTIN_KINDS',
    'Constraint',
    'ConstraintAssemblyError',
    'EquationGradientMismatch',
    'GeoSketchError',
    'GradientArityMismatch',
    'IndexOutOfRange',
    'LinearSystemError',
    'RelaxOptions',
    'RelaxResult',
    'StepReport',
    'UnknownConstraintKind',
    'PointStore',
    'colinear',
    'distance',
    'evaluate',
    'fixed_x',
    'fixed_y',
    'horizontal',
    'register_evaluator',
    'unregister_evaluator',
    'vertical',
    'assemble',
    'objective',
    'residual_breakdown',
    'gauss_seidel',
    'gauss_newton_step',
    'relax',
    'relaxation_step',
    'solve_least_squares',
    'GeometricSystem',
    'RelaxationConfig',
    'get_relaxation_config',
    'set_relaxation_config',
    'normalize_point_coords',
    'SCENARIOS',
]
