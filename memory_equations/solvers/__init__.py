"""
memory_equations solvers
========================

Modules:
  - time_doubling: time stepping with grid doubling and history decimation
  - steady_state: t → ∞ fixed point
  - solution: result containers
"""

from .time_doubling import (
    TimeDoublingSolver,
    RunState,
    solve,
)

from .steady_state import solve_steady_state

from .solution import (
    SolutionTimeSeries,
    SteadyStateSolution,
)


__all__ = [
    # Time doubling
    'TimeDoublingSolver',
    'RunState',
    'solve',

    # Steady state
    'solve_steady_state',

    # Results
    'SolutionTimeSeries',
    'SteadyStateSolution',
]
