"""
memory_equations analysis
=========================

Post-processing and numerical helpers that work on finished solutions.

Modules:
  - relaxation_time: first 1/e crossing of a correlator
  - root_finding: bracketed regula falsi
"""

from .relaxation_time import find_relaxation_time
from .root_finding import regula_falsi


__all__ = [
    'find_relaxation_time',
    'regula_falsi',
]
