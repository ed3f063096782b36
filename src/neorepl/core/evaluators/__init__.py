"""Pluggable language evaluators.

Evaluators:
    PythonEvaluator   Python in a per-session namespace
    VimEvaluator      Ex commands run by the host editor
"""

from neorepl.core.evaluators.base import BaseEvaluator, EvalContext, Evaluator
from neorepl.core.evaluators.python import PythonEvaluator
from neorepl.core.evaluators.vim import VimEvaluator

__all__ = [
    "BaseEvaluator",
    "EvalContext",
    "Evaluator",
    "PythonEvaluator",
    "VimEvaluator",
]
