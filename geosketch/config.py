"""Configuration helpers for relaxation steps."""

from __future__ import annotations

import copy
from dataclasses import dataclass

import numpy as np


@dataclass
class RelaxationConfig:
    """Tunables shared by the relaxation steps."""

    # ratio ||g||^2 / f at or below which a configuration counts as flat
    degeneracy_eps: float = float(np.finfo(float).eps)
    gauss_newton_damping: float = 1e-9
    gauss_seidel_sweeps: int = 100
    max_backtracks: int = 8


_RELAXATION_CONFIG = RelaxationConfig()


def get_relaxation_config() -> RelaxationConfig:
    return copy.deepcopy(_RELAXATION_CONFIG)


def set_relaxation_config(config: RelaxationConfig) -> None:
    global _RELAXATION_CONFIG
    _RELAXATION_CONFIG = copy.deepcopy(config)


__all__ = ["RelaxationConfig", "get_relaxation_config", "set_relaxation_config"]
