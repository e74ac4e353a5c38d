"""
Quaternion — кватернион r + xi + yj + zk

Immutable Pydantic модель кватерниона (scalar-first), где:
- r — скалярная часть
- (i, j, k) — векторная часть

Умножение некоммутативно и следует правилу Гамильтона:
    i² = j² = k² = ijk = -1

Аналитические функции (exp, ln, pow, root) обобщают комплексный случай:
единичный вектор n = v / |v| играет роль мнимой единицы.

    q = |q| · (cos θ + n·sin θ),   θ = atan2(|v|, r)
    q^p = |q|^p · (cos pθ + n·sin pθ)
    exp(q) = e^r · (cos |v| + n·sin |v|)
    ln(q) = ln|q| + n·θ

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Значения неизменяемы, каждая операция возвращает новый экземпляр
2. Нулевая векторная часть не приводит к делению на ноль:
   для r >= 0 результат чисто скалярный, для r < 0 направлением служит
   ось i (согласовано с комплексным вложением: ln(-2) = ln 2 + πi)
3. Деление на нулевой кватернион возвращает infinity() sentinel
4. ln(0) возвращает sentinel (-inf, 0, 0, 0)
"""

import logging
import math
import numbers
from collections.abc import Sequence
from typing import Any, Union

from pydantic import BaseModel, Field

from src.numerics.contracts.validators import validate_payload
from src.numerics.math.formatting import format_terms
from src.numerics.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    is_close,
    safe_cos,
    safe_exp,
    safe_pow,
    safe_product,
    safe_sin,
)
from src.numerics.math.numerical_safeguards import is_zero as is_zero_value
from src.numerics.numbers.base import ComplexNumber, complex_parts, is_complex_operand

logger = logging.getLogger(__name__)

QuaternionOperand = Union["Quaternion", ComplexNumber, float, complex]


def quaternion_parts(value: Any) -> tuple[float, float, float, float]:
    """
    Разложение операнда на (r, i, j, k).

    Комплексное число a + bi вкладывается как a + bi + 0j + 0k.

    Raises:
        TypeError: Если значение не является операндом
    """
    if isinstance(value, Quaternion):
        return value.r, value.i, value.j, value.k
    r, i = complex_parts(value)
    return r, i, 0.0, 0.0


def is_quaternion_operand(value: Any) -> bool:
    return isinstance(value, Quaternion) or is_complex_operand(value)


class Quaternion(BaseModel):
    """
    Кватернион r + xi + yj + zk.

    Immutable модель (frozen=True). Сравнение приближённое по каждой
    компоненте, поэтому экземпляры не хешируются.
    """

    r: float = Field(0.0, description="Скалярная часть")
    i: float = Field(0.0, description="Компонента i")
    j: float = Field(0.0, description="Компонента j")
    k: float = Field(0.0, description="Компонента k")

    model_config = {"frozen": True}  # Immutable

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, r: float = 0.0, i: float = 0.0, j: float = 0.0, k: float = 0.0) -> None:
        super().__init__(r=r, i=i, j=j, k=k)

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls) -> "Quaternion":
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def one(cls) -> "Quaternion":
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def infinity(cls) -> "Quaternion":
        """Sentinel бесконечности, возвращается при делении на ноль."""
        return cls(math.inf, math.inf, math.inf, math.inf)

    @classmethod
    def from_complex(cls, value: Any, j: float = 0.0, k: float = 0.0) -> "Quaternion":
        """
        Построение из комплексного числа a + bi и компонент j, k.

        Args:
            value: Complex, ComplexF, complex или вещественное число
            j: Компонента j
            k: Компонента k
        """
        r, i = complex_parts(value)
        return cls(r, i, j, k)

    @classmethod
    def from_axis_angle(cls, axis: Sequence[float], angle: float) -> "Quaternion":
        """
        Версор поворота на угол angle вокруг оси axis.

        q = cos(θ/2) + n·sin(θ/2), n = axis / |axis|

        Args:
            axis: Ось поворота (3 компоненты, не обязательно единичная)
            angle: Угол поворота в радианах

        Returns:
            Единичный кватернион

        Raises:
            ValueError: Если ось нулевая или не трёхмерная
        """
        if len(axis) != 3:
            raise ValueError(f"Rotation axis must have 3 components, got {len(axis)}")

        x, y, z = (float(c) for c in axis)
        axis_norm = math.hypot(x, y, z)
        if axis_norm == 0.0:
            raise ValueError("Rotation axis must be non-zero")

        half = angle / 2.0
        factor = math.sin(half) / axis_norm
        return cls(math.cos(half), x * factor, y * factor, z * factor)

    @classmethod
    def _coerce(cls, value: Any) -> "Quaternion":
        return cls(*quaternion_parts(value))

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    @property
    def scalar(self) -> float:
        return self.r

    @property
    def vector(self) -> tuple[float, float, float]:
        return self.i, self.j, self.k

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: QuaternionOperand) -> "Quaternion":
        r, i, j, k = quaternion_parts(other)
        return Quaternion(self.r + r, self.i + i, self.j + j, self.k + k)

    def sub(self, other: QuaternionOperand) -> "Quaternion":
        r, i, j, k = quaternion_parts(other)
        return Quaternion(self.r - r, self.i - i, self.j - j, self.k - k)

    def mul(self, other: QuaternionOperand) -> "Quaternion":
        """
        Произведение Гамильтона self · other.

        Некоммутативно: i·j = k, но j·i = -k.
        """
        r, i, j, k = quaternion_parts(other)
        return Quaternion(
            self.r * r - self.i * i - self.j * j - self.k * k,
            self.r * i + self.i * r + self.j * k - self.k * j,
            self.r * j - self.i * k + self.j * r + self.k * i,
            self.r * k + self.i * j - self.j * i + self.k * r,
        )

    def div(self, other: QuaternionOperand) -> "Quaternion":
        """
        Правое деление self · other⁻¹.

        Returns:
            Частное; infinity() для нулевого делителя
        """
        divisor = Quaternion._coerce(other)
        if divisor.norm() == 0.0:
            logger.debug("Division of %s by zero quaternion, returning infinity sentinel", self)
            return self.infinity()
        return self.mul(divisor.inverse())

    def conjugate(self) -> "Quaternion":
        """Сопряжение: векторная часть меняет знак."""
        return Quaternion(self.r, -self.i, -self.j, -self.k)

    def inverse(self) -> "Quaternion":
        """
        Мультипликативная обратная q⁻¹ = q* / |q|².

        Returns:
            Обратный кватернион; infinity() для нулевого
        """
        norm = self.norm()
        if norm == 0.0:
            logger.debug("Inverse of zero quaternion, returning infinity sentinel")
            return self.infinity()
        return Quaternion(self.r / norm / norm, -self.i / norm / norm, -self.j / norm / norm, -self.k / norm / norm)

    def unit(self) -> "Quaternion":
        """Версор q / |q|."""
        return self.div(self.norm())

    def versor(self) -> "Quaternion":
        return self.unit()

    # -------------------------------------------------------------------------
    # Norms
    # -------------------------------------------------------------------------

    def squared_norm(self) -> float:
        return self.r * self.r + self.i * self.i + self.j * self.j + self.k * self.k

    def norm(self) -> float:
        """Длина в 4D: sqrt(r² + i² + j² + k²)."""
        return math.hypot(self.r, self.i, self.j, self.k)

    def vector_norm(self) -> float:
        return math.hypot(self.i, self.j, self.k)

    def distance_to(self, other: QuaternionOperand) -> float:
        """Евклидово расстояние между кватернионами в 4D."""
        r, i, j, k = quaternion_parts(other)
        return math.hypot(self.r - r, self.i - i, self.j - j, self.k - k)

    # -------------------------------------------------------------------------
    # Analytic functions
    # -------------------------------------------------------------------------

    def _polar_axis(self) -> tuple[float, tuple[float, float, float]]:
        # atan2 сохраняет точность при |v| << |r|, где r / |q| округляется до 1
        vector_norm = self.vector_norm()
        angle = math.atan2(vector_norm, self.r)
        if vector_norm == 0.0:
            return angle, (1.0, 0.0, 0.0)
        return angle, (self.i / vector_norm, self.j / vector_norm, self.k / vector_norm)

    def exp(self) -> "Quaternion":
        """exp(q) = e^r · (cos |v| + n·sin |v|)"""
        scale = safe_exp(self.r)
        vector_norm = self.vector_norm()

        if vector_norm == 0.0:
            return Quaternion(scale, 0.0, 0.0, 0.0)

        factor = safe_product(scale, safe_sin(vector_norm)) / vector_norm
        return Quaternion(
            safe_product(scale, safe_cos(vector_norm)),
            factor * self.i,
            factor * self.j,
            factor * self.k,
        )

    def ln(self) -> "Quaternion":
        """
        Главное значение логарифма: ln|q| + n·θ.

        Returns:
            Логарифм; (-inf, 0, 0, 0) для нулевого кватерниона
        """
        norm = self.norm()
        if norm == 0.0:
            logger.debug("Logarithm of zero quaternion, returning (-inf, 0, 0, 0)")
            return Quaternion(-math.inf, 0.0, 0.0, 0.0)

        angle, (x, y, z) = self._polar_axis()
        return Quaternion(math.log(norm), angle * x, angle * y, angle * z)

    def pow(self, exponent: QuaternionOperand) -> "Quaternion":
        """
        Возведение в степень.

        Вещественный показатель: |q|^p · (cos pθ + n·sin pθ).
        Кватернионный/комплексный показатель: exp(ln(q) · p).

        Нулевое основание: показатель 0 → one(), Re(показатель) > 0 → zero(),
        иначе → infinity().
        """
        if isinstance(exponent, numbers.Real):
            return self._pow_real(float(exponent))

        power = Quaternion._coerce(exponent)
        if self.norm() == 0.0:
            return self._power_of_zero(power.r, power.squared_norm() == 0.0)

        return self.ln().mul(power).exp()

    def root(self, order: float) -> "Quaternion":
        """
        Главный корень степени order.

        Raises:
            ValueError: Если order <= 0
        """
        if order <= 0:
            raise ValueError(f"Root order must be positive, got {order}")
        return self._pow_real(1.0 / order)

    def _pow_real(self, power: float) -> "Quaternion":
        norm = self.norm()
        if norm == 0.0:
            return self._power_of_zero(power, power == 0.0)

        angle, (x, y, z) = self._polar_axis()
        scale = safe_pow(norm, power)
        theta = power * angle
        factor = safe_product(scale, safe_sin(theta))
        return Quaternion(safe_product(scale, safe_cos(theta)), factor * x, factor * y, factor * z)

    def _power_of_zero(self, real_exponent: float, exponent_is_zero: bool) -> "Quaternion":
        if exponent_is_zero:
            return self.one()
        if real_exponent > 0:
            return self.zero()
        logger.debug("Zero quaternion raised to non-positive power %s, returning infinity sentinel", real_exponent)
        return self.infinity()

    # -------------------------------------------------------------------------
    # Rotation
    # -------------------------------------------------------------------------

    def rotate_vector(self, vector: Sequence[float]) -> tuple[float, float, float]:
        """
        Поворот 3D-вектора: v' = q · v · q⁻¹.

        Для неединичного q масштаб сокращается, поэтому результат
        совпадает с поворотом версором q / |q|.

        Args:
            vector: (x, y, z)

        Returns:
            Повёрнутый вектор (x', y', z')
        """
        if len(vector) != 3:
            raise ValueError(f"Vector must have 3 components, got {len(vector)}")

        x, y, z = (float(c) for c in vector)
        rotated = self.mul(Quaternion(0.0, x, y, z)).mul(self.inverse())
        return rotated.i, rotated.j, rotated.k

    # -------------------------------------------------------------------------
    # Predicates and comparison
    # -------------------------------------------------------------------------

    def is_zero(self, tol: float = EPS_FLOAT_COMPARE_ABS) -> bool:
        """Все компоненты по модулю не больше tol."""
        return all(is_zero_value(c, tol) for c in (self.r, self.i, self.j, self.k))

    def is_unit(self, tol: float = EPS_FLOAT_COMPARE_ABS) -> bool:
        return is_close(self.norm(), 1.0, abs_tol=tol)

    def is_infinite(self) -> bool:
        return any(math.isinf(c) for c in (self.r, self.i, self.j, self.k))

    def is_close(self, other: QuaternionOperand, rel_tol: float | None = None, abs_tol: float | None = None) -> bool:
        """
        Приближённое равенство по каждой компоненте.

        Raises:
            TypeError: Если other не является операндом
        """
        tolerances = {}
        if rel_tol is not None:
            tolerances["rel_tol"] = rel_tol
        if abs_tol is not None:
            tolerances["abs_tol"] = abs_tol

        others = quaternion_parts(other)
        mine = (self.r, self.i, self.j, self.k)
        return all(is_close(a, b, **tolerances) for a, b in zip(mine, others))

    # -------------------------------------------------------------------------
    # Payload
    # -------------------------------------------------------------------------

    def to_payload(self) -> dict[str, Any]:
        """JSON-совместимое представление (контракт quaternion.json)."""
        return {"type": "quaternion", "r": self.r, "i": self.i, "j": self.j, "k": self.k}

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Quaternion":
        """
        Построение из payload с валидацией контракта.

        Raises:
            ValidationError: Если payload не соответствует quaternion.json
        """
        validate_payload(data, expected_type="quaternion")
        return cls(data["r"], data["i"], data["j"], data["k"])

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not is_quaternion_operand(other):
            return NotImplemented
        return self.is_close(other)

    def __add__(self, other: Any) -> "Quaternion":
        if not is_quaternion_operand(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other: Any) -> "Quaternion":
        if not is_quaternion_operand(other):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "Quaternion":
        if not is_quaternion_operand(other):
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other: Any) -> "Quaternion":
        if not is_quaternion_operand(other):
            return NotImplemented
        return Quaternion._coerce(other).sub(self)

    def __mul__(self, other: Any) -> "Quaternion":
        if not is_quaternion_operand(other):
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other: Any) -> "Quaternion":
        # other · self: порядок важен для некоммутативного произведения
        if not is_quaternion_operand(other):
            return NotImplemented
        return Quaternion._coerce(other).mul(self)

    def __truediv__(self, other: Any) -> "Quaternion":
        if not is_quaternion_operand(other):
            return NotImplemented
        return self.div(other)

    def __rtruediv__(self, other: Any) -> "Quaternion":
        if not is_quaternion_operand(other):
            return NotImplemented
        return Quaternion._coerce(other).div(self)

    def __pow__(self, exponent: Any) -> "Quaternion":
        if not is_quaternion_operand(exponent):
            return NotImplemented
        return self.pow(exponent)

    def __rpow__(self, base: Any) -> "Quaternion":
        if not is_quaternion_operand(base):
            return NotImplemented
        return Quaternion._coerce(base).pow(self)

    def __neg__(self) -> "Quaternion":
        return Quaternion(-self.r, -self.i, -self.j, -self.k)

    def __abs__(self) -> float:
        return self.norm()

    def __str__(self) -> str:
        return format_terms([(self.r, ""), (self.i, "i"), (self.j, "j"), (self.k, "k")])
