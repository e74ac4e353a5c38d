"""
Числовые типы: Complex, ComplexF, Quaternion.

Все значения immutable (frozen Pydantic модели).
"""

from src.numerics.numbers.base import ComplexNumber
from src.numerics.numbers.complex import Complex
from src.numerics.numbers.complex_f import ComplexF, narrow_to_float32
from src.numerics.numbers.quaternion import Quaternion

__all__ = [
    "ComplexNumber",
    "Complex",
    "ComplexF",
    "Quaternion",
    "narrow_to_float32",
]
