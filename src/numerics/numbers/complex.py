"""
Complex — комплексное число двойной точности

Immutable Pydantic модель числа вида a + bi, где:
- a (r) — вещественная часть
- b (i) — мнимая часть

Для одинарной точности используется ComplexF.

Пример:
    >>> c1 = Complex(3, 4)        # 3 + 4i
    >>> c2 = Complex(1, -2)       # 1 - 2i
    >>> str(c1.add(c2))
    '(4 + 2i)'
    >>> str(c1 / 0)
    '(inf + infi)'
"""

from pydantic import BaseModel, Field

from src.numerics.numbers.base import ComplexNumber


class Complex(ComplexNumber, BaseModel):
    """
    Комплексное число двойной точности.

    Immutable модель (frozen=True): все операции создают новый экземпляр.
    Сравнение приближённое (EPS_FLOAT_COMPARE_REL / EPS_FLOAT_COMPARE_ABS),
    поэтому экземпляры не хешируются.
    """

    r: float = Field(0.0, description="Вещественная часть")
    i: float = Field(0.0, description="Мнимая часть")

    model_config = {"frozen": True}  # Immutable

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, r: float = 0.0, i: float = 0.0) -> None:
        super().__init__(r=r, i=i)
