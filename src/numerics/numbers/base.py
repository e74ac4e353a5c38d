"""
ComplexNumber — общий контракт операций над комплексными числами

Mixin, реализующий все операции над числом вида r + i·i в терминах полей
r и i конкретного класса. Конкретные классы (Complex, ComplexF) объявляют
поля, точность хранения и толерантности сравнения; результат любой операции
имеет тип получателя:

    Complex(1, 2) + ComplexF(1, 2)  → Complex
    ComplexF(1, 2) + Complex(1, 2)  → ComplexF

Операнд любой бинарной операции:
- комплексное число любой точности (ComplexNumber)
- вещественное число (numbers.Real, включая numpy-скаляры)
- встроенный complex

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Значения неизменяемы, каждая операция возвращает новый экземпляр
2. Деление на точный ноль возвращает infinity() sentinel, а не исключение
3. Переполнение exp/pow/cosh/sinh даёт ±inf, а не OverflowError
4. Сравнение (==) приближённое: is_close по каждой компоненте
5. tan/tanh не дают NaN при больших |Im z| / |Re z|: результат стремится к ±i / ±1

ФОРМУЛЫ:
    z^p        = |z|^p · (cos pφ + i·sin pφ)           (p вещественное)
    z^w        = exp(w · ln z)                          (w комплексное)
    z^(1/n)    = |z|^(1/n) · (cos φ/n + i·sin φ/n)
    exp(a+bi)  = e^a · (cos b + i·sin b)
    tanh(a+bi) = (sinh 2a + i·sin 2b) / (cosh 2a + cos 2b)
    tan z      = -i · tanh(i·z)
    ln z       = ln|z| + i·φ
"""

import logging
import math
import numbers
from functools import cached_property
from typing import Any, ClassVar, Final, Union

from src.numerics.contracts.validators import validate_payload
from src.numerics.math.formatting import format_terms
from src.numerics.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    is_close,
    safe_cos,
    safe_cosh,
    safe_exp,
    safe_pow,
    safe_product,
    safe_sin,
    safe_sinh,
)
from src.numerics.math.numerical_safeguards import is_zero as is_zero_value

logger = logging.getLogger(__name__)

ComplexOperand = Union["ComplexNumber", float, complex]

# |Re z|, начиная с которого tanh(z) = ±1 в double (e^(-2·20) < ulp(1) / 2)
TANH_SATURATION: Final[float] = 20.0


# =============================================================================
# OPERAND COERCION
# =============================================================================


def is_complex_operand(value: Any) -> bool:
    """Проверка, может ли значение быть операндом комплексной арифметики."""
    return isinstance(value, (ComplexNumber, numbers.Complex))


def complex_parts(value: Any) -> tuple[float, float]:
    """
    Разложение операнда на (вещественная, мнимая) части.

    Args:
        value: ComplexNumber, вещественное число или complex

    Returns:
        (r, i) как float

    Raises:
        TypeError: Если значение не является комплексным операндом
    """
    if isinstance(value, ComplexNumber):
        return value.r, value.i
    if isinstance(value, numbers.Real):
        return float(value), 0.0
    if isinstance(value, numbers.Complex):
        return float(value.real), float(value.imag)
    raise TypeError(f"Unsupported complex operand type: {type(value).__name__}")


# =============================================================================
# COMPLEX NUMBER CONTRACT
# =============================================================================


class ComplexNumber:
    """
    Операции над комплексным числом r + i·i.

    Класс-наследник обязан предоставить поля r, i и конструктор
    cls(r, i). Толерантности сравнения переопределяются через
    COMPARE_REL_TOL / COMPARE_ABS_TOL.
    """

    COMPARE_REL_TOL: ClassVar[float] = EPS_FLOAT_COMPARE_REL
    COMPARE_ABS_TOL: ClassVar[float] = EPS_FLOAT_COMPARE_ABS
    PAYLOAD_TYPE: ClassVar[str] = "complex"

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls) -> "ComplexNumber":
        """0 + 0i"""
        return cls(0.0, 0.0)

    @classmethod
    def one(cls) -> "ComplexNumber":
        """1 + 0i"""
        return cls(1.0, 0.0)

    @classmethod
    def infinity(cls) -> "ComplexNumber":
        """
        Sentinel бесконечности (inf + inf·i).

        Возвращается при делении на ноль и при возведении нуля
        в отрицательную степень.
        """
        return cls(math.inf, math.inf)

    @classmethod
    def imaginary(cls, value: float) -> "ComplexNumber":
        """Чисто мнимое число 0 + value·i."""
        return cls(0.0, value)

    @classmethod
    def from_polar(cls, modulus: float, argument: float) -> "ComplexNumber":
        """
        Построение из полярной формы.

        Args:
            modulus: Модуль |z|
            argument: Аргумент φ в радианах

        Returns:
            modulus · (cos φ + i·sin φ)
        """
        return cls(
            safe_product(modulus, safe_cos(argument)),
            safe_product(modulus, safe_sin(argument)),
        )

    @classmethod
    def from_complex(cls, value: ComplexOperand) -> "ComplexNumber":
        """
        Копия значения в точности этого класса.

        Принимает комплексное число любой точности, вещественное число
        или встроенный complex.
        """
        return cls(*complex_parts(value))

    # -------------------------------------------------------------------------
    # Field arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: ComplexOperand) -> "ComplexNumber":
        """Сумма self + other."""
        r, i = complex_parts(other)
        return type(self)(self.r + r, self.i + i)

    def sub(self, other: ComplexOperand) -> "ComplexNumber":
        """Разность self - other."""
        r, i = complex_parts(other)
        return type(self)(self.r - r, self.i - i)

    def mul(self, other: ComplexOperand) -> "ComplexNumber":
        """Произведение (a + bi)(c + di) = (ac - bd) + (ad + bc)i."""
        r, i = complex_parts(other)
        return type(self)(self.r * r - self.i * i, self.r * i + self.i * r)

    def div(self, other: ComplexOperand) -> "ComplexNumber":
        """
        Частное self / other.

        Используется масштабированный алгоритм Smith: знаменатель
        c² + d² не вычисляется явно, поэтому малые и большие делители
        не вызывают underflow/overflow.

        Args:
            other: Делитель

        Returns:
            Частное; infinity() если делитель точно равен нулю
        """
        c, d = complex_parts(other)
        a, b = self.r, self.i

        if c == 0.0 and d == 0.0:
            logger.debug("Division of %s by zero, returning infinity sentinel", self)
            return self.infinity()

        if math.isnan(c) or math.isnan(d):
            return type(self)(math.nan, math.nan)

        if abs(c) >= abs(d):
            ratio = d / c
            denom = c + d * ratio
            return type(self)((a + b * ratio) / denom, (b - a * ratio) / denom)

        ratio = c / d
        denom = c * ratio + d
        return type(self)((a * ratio + b) / denom, (b * ratio - a) / denom)

    # -------------------------------------------------------------------------
    # Powers and roots
    # -------------------------------------------------------------------------

    def pow(self, exponent: ComplexOperand) -> "ComplexNumber":
        """
        Возведение в степень.

        Вещественный показатель: полярная форма |z|^p (cos pφ + i·sin pφ).
        Комплексный показатель: exp(w · ln z).

        Нулевое основание:
        - показатель 0 → one()
        - Re(показатель) > 0 → zero()
        - иначе → infinity()
        """
        if isinstance(exponent, numbers.Real):
            return self._pow_real(float(exponent))

        er, ei = complex_parts(exponent)
        if self.magnitude() == 0.0:
            return self._power_of_zero(er, er == 0.0 and ei == 0.0)

        return self.ln().mul(exponent).exp()

    def root(self, order: float) -> "ComplexNumber":
        """
        Главный корень степени order.

        Args:
            order: Степень корня (2 для квадратного, 3 для кубического)

        Returns:
            |z|^(1/n) · (cos φ/n + i·sin φ/n)

        Raises:
            ValueError: Если order == 0
        """
        order = float(order)
        if order == 0.0:
            raise ValueError(f"Root order must be non-zero, got {order}")

        modulus, argument = self._polar
        if modulus == 0.0:
            return self._power_of_zero(1.0 / order, False)

        scale = safe_pow(modulus, 1.0 / order)
        angle = argument / order
        return type(self)(
            safe_product(scale, safe_cos(angle)),
            safe_product(scale, safe_sin(angle)),
        )

    def _pow_real(self, power: float) -> "ComplexNumber":
        modulus, argument = self._polar
        if modulus == 0.0:
            return self._power_of_zero(power, power == 0.0)

        scale = safe_pow(modulus, power)
        angle = power * argument
        return type(self)(
            safe_product(scale, safe_cos(angle)),
            safe_product(scale, safe_sin(angle)),
        )

    def _power_of_zero(self, real_exponent: float, exponent_is_zero: bool) -> "ComplexNumber":
        if exponent_is_zero:
            return self.one()
        if real_exponent > 0:
            return self.zero()
        logger.debug("Zero raised to non-positive power %s, returning infinity sentinel", real_exponent)
        return self.infinity()

    # -------------------------------------------------------------------------
    # Exponential, logarithm, trigonometry
    # -------------------------------------------------------------------------

    def exp(self) -> "ComplexNumber":
        """e^(a + bi) = e^a · (cos b + i·sin b)"""
        scale = safe_exp(self.r)
        return type(self)(
            safe_product(scale, safe_cos(self.i)),
            safe_product(scale, safe_sin(self.i)),
        )

    def ln(self) -> "ComplexNumber":
        """
        Главное значение натурального логарифма: ln|z| + i·arg(z).

        ln(0) = -inf + 0i.
        """
        modulus, argument = self._polar
        if modulus == 0.0:
            return type(self)(-math.inf, 0.0)
        return type(self)(math.log(modulus), argument)

    def sin(self) -> "ComplexNumber":
        """sin(a + bi) = sin a · cosh b + i·cos a · sinh b"""
        return type(self)(
            safe_product(safe_cosh(self.i), safe_sin(self.r)),
            safe_product(safe_sinh(self.i), safe_cos(self.r)),
        )

    def cos(self) -> "ComplexNumber":
        """cos(a + bi) = cos a · cosh b - i·sin a · sinh b"""
        return type(self)(
            safe_product(safe_cosh(self.i), safe_cos(self.r)),
            -safe_product(safe_sinh(self.i), safe_sin(self.r)),
        )

    def tan(self) -> "ComplexNumber":
        """tan z = -i · tanh(i·z); при больших |Im z| стремится к ±i."""
        rotated = type(self)(-self.i, self.r).tanh()
        if rotated.is_infinite():
            return rotated
        return type(self)(rotated.i, -rotated.r)

    def sinh(self) -> "ComplexNumber":
        """sinh(a + bi) = sinh a · cos b + i·cosh a · sin b"""
        return type(self)(
            safe_product(safe_sinh(self.r), safe_cos(self.i)),
            safe_product(safe_cosh(self.r), safe_sin(self.i)),
        )

    def cosh(self) -> "ComplexNumber":
        """cosh(a + bi) = cosh a · cos b + i·sinh a · sin b"""
        return type(self)(
            safe_product(safe_cosh(self.r), safe_cos(self.i)),
            safe_product(safe_sinh(self.r), safe_sin(self.i)),
        )

    def tanh(self) -> "ComplexNumber":
        """
        tanh(a + bi) = (sinh 2a + i·sin 2b) / (cosh 2a + cos 2b)

        При |a| > TANH_SATURATION cosh 2a и sinh 2a переполнились бы,
        поэтому используется предел: ±1 + i·2·sin 2b·e^(-2|a|).

        Returns:
            Гиперболический тангенс; infinity() в полюсе (a = 0, cos 2b = -1)
        """
        a, b = self.r, self.i
        if abs(a) > TANH_SATURATION:
            return type(self)(
                math.copysign(1.0, a),
                safe_product(2.0 * safe_sin(2.0 * b), math.exp(-2.0 * abs(a))),
            )

        denominator = safe_cosh(2.0 * a) + safe_cos(2.0 * b)
        if denominator == 0.0:
            logger.debug("tanh pole at %s, returning infinity sentinel", self)
            return self.infinity()
        return type(self)(safe_sinh(2.0 * a) / denominator, safe_sin(2.0 * b) / denominator)

    # -------------------------------------------------------------------------
    # Conjugation and projections
    # -------------------------------------------------------------------------

    def conjugate(self) -> "ComplexNumber":
        """Сопряжённое число r - i·i."""
        return type(self)(self.r, -self.i)

    def project_onto_real(self) -> "ComplexNumber":
        return type(self)(self.r, 0.0)

    def project_onto_imaginary(self) -> "ComplexNumber":
        return type(self)(0.0, self.i)

    # -------------------------------------------------------------------------
    # Modulus and argument
    # -------------------------------------------------------------------------

    @cached_property
    def _polar(self) -> tuple[float, float]:
        # (|z|, φ), один раз на экземпляр
        return math.hypot(self.r, self.i), math.atan2(self.i, self.r)

    def absolute_value(self) -> float:
        """
        Квадрат модуля r² + i².

        Returns:
            |z|² (без извлечения корня)
        """
        return self.r * self.r + self.i * self.i

    def magnitude(self) -> float:
        """Модуль |z| = sqrt(r² + i²)."""
        return self._polar[0]

    def modulus(self) -> float:
        return self.magnitude()

    def argument(self) -> float:
        """Аргумент φ = atan2(i, r) в радианах, диапазон [-π, π]."""
        return self._polar[1]

    def angle(self) -> float:
        return self.argument()

    # -------------------------------------------------------------------------
    # Predicates and comparison
    # -------------------------------------------------------------------------

    def is_zero(self, tol: float | None = None) -> bool:
        """Обе компоненты по модулю не больше tol (default: COMPARE_ABS_TOL)."""
        tol = self.COMPARE_ABS_TOL if tol is None else tol
        return is_zero_value(self.r, tol) and is_zero_value(self.i, tol)

    def is_unit(self, tol: float | None = None) -> bool:
        """|z| ≈ 1 (абсолютная толерантность tol, default: COMPARE_ABS_TOL)"""
        return is_close(
            self.magnitude(),
            1.0,
            rel_tol=self.COMPARE_REL_TOL,
            abs_tol=self.COMPARE_ABS_TOL if tol is None else tol,
        )

    def is_infinite(self) -> bool:
        return math.isinf(self.r) or math.isinf(self.i)

    def is_close(
        self,
        other: ComplexOperand,
        rel_tol: float | None = None,
        abs_tol: float | None = None,
    ) -> bool:
        """
        Приближённое равенство по каждой компоненте.

        Args:
            other: Сравниваемое значение
            rel_tol: Относительная толерантность (default: COMPARE_REL_TOL)
            abs_tol: Абсолютная толерантность (default: COMPARE_ABS_TOL)

        Returns:
            True если обе компоненты близки

        Raises:
            TypeError: Если other не является комплексным операндом
        """
        r, i = complex_parts(other)
        rel_tol = self.COMPARE_REL_TOL if rel_tol is None else rel_tol
        abs_tol = self.COMPARE_ABS_TOL if abs_tol is None else abs_tol
        return is_close(self.r, r, rel_tol=rel_tol, abs_tol=abs_tol) and is_close(
            self.i, i, rel_tol=rel_tol, abs_tol=abs_tol
        )

    # -------------------------------------------------------------------------
    # Payload
    # -------------------------------------------------------------------------

    def to_payload(self) -> dict[str, Any]:
        """JSON-совместимое представление (контракт complex.json)."""
        return {"type": self.PAYLOAD_TYPE, "r": self.r, "i": self.i}

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "ComplexNumber":
        """
        Построение из payload с валидацией контракта.

        Raises:
            ValidationError: Если payload не соответствует complex.json
            PayloadTypeError: Если data["type"] != PAYLOAD_TYPE (другая точность)
        """
        validate_payload(data, expected_type=cls.PAYLOAD_TYPE)
        return cls(data["r"], data["i"])

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not is_complex_operand(other):
            return NotImplemented
        return self.is_close(other)

    def __add__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.from_complex(other).sub(self)

    def __mul__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.mul(other)

    def __truediv__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.div(other)

    def __rtruediv__(self, other: Any) -> "ComplexNumber":
        if not is_complex_operand(other):
            return NotImplemented
        return self.from_complex(other).div(self)

    def __pow__(self, exponent: Any) -> "ComplexNumber":
        if not is_complex_operand(exponent):
            return NotImplemented
        return self.pow(exponent)

    def __rpow__(self, base: Any) -> "ComplexNumber":
        if not is_complex_operand(base):
            return NotImplemented
        return self.from_complex(base).pow(self)

    def __neg__(self) -> "ComplexNumber":
        return type(self)(-self.r, -self.i)

    def __abs__(self) -> float:
        return self.magnitude()

    def __complex__(self) -> complex:
        return complex(self.r, self.i)

    def __str__(self) -> str:
        return format_terms([(self.r, ""), (self.i, "i")])
