"""Линейная алгебра: плотная изменяемая матрица."""

from src.numerics.linalg.matrix import MATRIX_EPS, Matrix, NonSquareMatrixError

__all__ = [
    "MATRIX_EPS",
    "Matrix",
    "NonSquareMatrixError",
]
