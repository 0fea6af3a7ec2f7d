from .bfgs import (bfgs_optim, FitResult, ConvergenceWarning,
                   OptimizationInterrupted)
from .control import ControlBFGS, ConvergenceCriterion, DEBUG_HESSIAN
from .convergence import ConvergenceComputationError
from .function import Model, AutogradModel
from .hessian import bfgs_update
from .line_search import glmnet_line_search
from .minimize import minimize_penalized
from .penalty import SmoothPenalty, NonSmoothPenalty, RidgePenalty, NoPenalty
from .tuning import TuningParametersEnet

__all__ = ['bfgs_optim', 'minimize_penalized', 'glmnet_line_search',
           'bfgs_update', 'FitResult', 'ControlBFGS', 'ConvergenceCriterion',
           'DEBUG_HESSIAN', 'ConvergenceWarning', 'OptimizationInterrupted',
           'ConvergenceComputationError', 'Model', 'AutogradModel',
           'SmoothPenalty', 'NonSmoothPenalty', 'RidgePenalty', 'NoPenalty',
           'TuningParametersEnet']

__version__ = "0.1.0"
