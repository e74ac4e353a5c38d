"""
Numerical Safeguards — Safe Math Primitives

Модуль обеспечивает численную устойчивость аналитических функций
комплексных чисел и кватернионов:
- Epsilon-сравнения float с учётом машинной точности (double и float32)
- Защита от OverflowError в exp/pow/cosh/sinh (возвращается ±inf, как в IEEE 754)
- Округление half-up для канонического форматирования

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Переполнение никогда не бросает исключение (возвращается ±inf)
2. Произведение inf · 0 даёт 0, а не NaN
3. Float сравнения всегда учитывают машинную точность
4. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Относительная толерантность сравнения double-значений (Complex, Quaternion)
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Абсолютная толерантность сравнения double-значений
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Толерантности для значений одинарной точности (ComplexF).
# Машинный epsilon float32 ≈ 1.19e-7, цепочка из нескольких операций
# накапливает ошибку на порядок-два больше.
EPS_FLOAT32_COMPARE_REL: Final[float] = 1e-5
EPS_FLOAT32_COMPARE_ABS: Final[float] = 1e-6


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение валидное (finite), False если NaN или Inf
    """
    return math.isfinite(value)


# =============================================================================
# ЗАЩИТА ОТ ПЕРЕПОЛНЕНИЯ
# =============================================================================


def safe_exp(value: float) -> float:
    """
    Экспонента без OverflowError.

    math.exp бросает OverflowError для value > ~709.78, тогда как IEEE 754
    определяет результат как +inf. Функция возвращает +inf.

    Args:
        value: Показатель степени

    Returns:
        e^value или +inf при переполнении

    Examples:
        >>> safe_exp(0.0)
        1.0
        >>> safe_exp(1000.0)
        inf
        >>> safe_exp(float('-inf'))
        0.0
    """
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


def safe_pow(base: float, exponent: float) -> float:
    """
    Возведение неотрицательного основания в вещественную степень.

    Используется для модулей (|z|^p), поэтому основание не может быть
    отрицательным.

    Args:
        base: Основание (>= 0)
        exponent: Показатель

    Returns:
        base^exponent; +inf при переполнении или при 0^(отрицательное)

    Raises:
        ValueError: Если base < 0

    Examples:
        >>> safe_pow(4.0, 0.5)
        2.0
        >>> safe_pow(0.0, -1.0)
        inf
        >>> safe_pow(10.0, 400.0)
        inf
    """
    if base < 0:
        raise ValueError(f"base must be non-negative, got {base}")

    if base == 0.0 and exponent < 0:
        return math.inf

    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf


def safe_cosh(value: float) -> float:
    """
    Гиперболический косинус без OverflowError.

    Returns:
        cosh(value) или +inf при переполнении
    """
    try:
        return math.cosh(value)
    except OverflowError:
        return math.inf


def safe_sinh(value: float) -> float:
    """
    Гиперболический синус без OverflowError.

    Returns:
        sinh(value) или ±inf (знак value) при переполнении
    """
    try:
        return math.sinh(value)
    except OverflowError:
        return math.copysign(math.inf, value)


def safe_sin(value: float) -> float:
    """
    Синус, определённый для ±inf.

    math.sin(±inf) бросает ValueError; IEEE 754 даёт NaN.
    Бесконечные аргументы возникают из inf-sentinel значений.

    Returns:
        sin(value) или NaN для бесконечного аргумента
    """
    if math.isinf(value):
        return math.nan
    return math.sin(value)


def safe_cos(value: float) -> float:
    """
    Косинус, определённый для ±inf.

    Returns:
        cos(value) или NaN для бесконечного аргумента
    """
    if math.isinf(value):
        return math.nan
    return math.cos(value)


def safe_product(scale: float, factor: float) -> float:
    """
    Произведение модуля на тригонометрический множитель.

    В полярной форме scale может быть +inf (переполнение), а factor точно
    равен 0 (например, sin(0)). inf * 0 даёт NaN, хотя компонента
    тождественно нулевая.

    Args:
        scale: Модуль (может быть inf)
        factor: Множитель (cos/sin угла)

    Returns:
        0.0 если factor == 0, иначе scale * factor

    Examples:
        >>> safe_product(float('inf'), 0.0)
        0.0
        >>> safe_product(2.0, 0.5)
        1.0
    """
    if factor == 0.0:
        return 0.0
    return scale * factor


# =============================================================================
# EPSILON-СРАВНЕНИЯ FLOAT
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    Алгоритм:
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Бесконечности равны только бесконечностям того же знака, NaN не равен
    ничему (поведение math.isclose).

    Args:
        a: Первое значение
        b: Второе значение
        rel_tol: Относительная толерантность (default: 1e-9)
        abs_tol: Абсолютная толерантность (default: 1e-12)

    Returns:
        True если значения близки с учётом толерантности

    Examples:
        >>> is_close(1.0, 1.0 + 1e-10)
        True
        >>> is_close(1.0, 1.1)
        False
        >>> is_close(0.0, 1e-13)
        True  # abs diff < abs_tol
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def is_zero(value: float, tol: float = EPS_FLOAT_COMPARE_ABS) -> bool:
    """
    Проверка, близко ли значение к нулю с учётом толерантности.

    Args:
        value: Проверяемое значение
        tol: Абсолютная толерантность (default: EPS_FLOAT_COMPARE_ABS)

    Returns:
        True если abs(value) <= tol
    """
    return abs(value) <= tol


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def round_half_up(value: float, decimals: int) -> float:
    """
    Округление до decimals знаков после запятой, половина к +inf.

    Шаги считаются как floor(value · 10^decimals + 1/2), поэтому
    2.5 → 3, а -2.5 → -2 (в отличие от встроенного round, который
    округляет к чётному). Дробная часть сравнивается с 0.5 точно,
    без сложения, чтобы 0.49999999999999994 не превращалось в 1.

    Args:
        value: Значение для округления (конечное)
        decimals: Количество знаков после запятой (>= 0)

    Returns:
        Округлённое значение; знак value сохраняется для нулевого результата

    Raises:
        ValueError: Если decimals < 0

    Examples:
        >>> round_half_up(1.23456789, 2)
        1.23
        >>> round_half_up(-2.5, 0)
        -2.0
        >>> round_half_up(-0.000004, 5)
        -0.0
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    scale = 10.0**decimals
    scaled = value * scale
    steps = math.floor(scaled)
    if scaled - steps >= 0.5:
        steps += 1

    # math.copysign сохраняет -0.0 для малых отрицательных значений
    return math.copysign(steps / scale, value)
