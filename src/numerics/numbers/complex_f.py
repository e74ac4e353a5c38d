"""
ComplexF — комплексное число одинарной точности

Каждая компонента при создании экземпляра округляется до IEEE 754 float32
(numpy.float32). Поскольку все операции ComplexNumber создают результат через
конструктор, любой результат также имеет одинарную точность.

Переполнение float32 (|x| > ~3.4e38) даёт ±inf.
"""

from typing import ClassVar

import numpy as np
from pydantic import BaseModel, Field, field_validator

from src.numerics.math.numerical_safeguards import (
    EPS_FLOAT32_COMPARE_ABS,
    EPS_FLOAT32_COMPARE_REL,
)
from src.numerics.numbers.base import ComplexNumber


def narrow_to_float32(value: float) -> float:
    """
    Округление double до ближайшего float32.

    Args:
        value: Значение двойной точности

    Returns:
        float, точно представимый в float32 (±inf при переполнении)
    """
    with np.errstate(over="ignore"):
        return float(np.float32(value))


class ComplexF(ComplexNumber, BaseModel):
    """
    Комплексное число одинарной точности.

    Immutable модель (frozen=True). Толерантности сравнения соответствуют
    машинной точности float32.
    """

    r: float = Field(0.0, description="Вещественная часть (float32)")
    i: float = Field(0.0, description="Мнимая часть (float32)")

    model_config = {"frozen": True}  # Immutable

    COMPARE_REL_TOL: ClassVar[float] = EPS_FLOAT32_COMPARE_REL
    COMPARE_ABS_TOL: ClassVar[float] = EPS_FLOAT32_COMPARE_ABS
    PAYLOAD_TYPE: ClassVar[str] = "complex_f"

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, r: float = 0.0, i: float = 0.0) -> None:
        super().__init__(r=r, i=i)

    @field_validator("r", "i")
    @classmethod
    def narrow_component(cls, v: float) -> float:
        """Компоненты хранятся с точностью float32."""
        return narrow_to_float32(v)

    def to_numpy(self) -> np.complex64:
        """Значение как numpy.complex64."""
        return np.complex64(complex(self.r, self.i))
