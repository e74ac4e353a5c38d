"""
numerics — комплексные числа, кватернионы и плотные матрицы

Модули:
- numbers/   : Complex, ComplexF, Quaternion (immutable значения)
- linalg/    : Matrix (изменяемая плотная матрица)
- math/      : численные защиты и каноническое форматирование
- contracts/ : JSON Schema контракты payload-представлений

Библиотека не настраивает логирование: к корневому логгеру пакета
подключён NullHandler, уровень и вывод задаёт приложение.
"""

import logging

from src.numerics.linalg import MATRIX_EPS, Matrix, NonSquareMatrixError
from src.numerics.numbers import Complex, ComplexF, ComplexNumber, Quaternion

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Complex",
    "ComplexF",
    "ComplexNumber",
    "Quaternion",
    "Matrix",
    "NonSquareMatrixError",
    "MATRIX_EPS",
]
