"""
Canonical Formatting — человекочитаемая запись числовых значений

Формат:
- каждая компонента округляется до FORMAT_DECIMALS знаков, половина к +inf
  (-0.000005 → "")
- хвостовые нули отбрасываются: 2.50000 → "2.5", 3.00000 → "3"
- компоненты, округлившиеся до 0 или -0, опускаются
- одна оставшаяся компонента печатается без скобок: "3", "-2.5i"
- несколько компонент: "(1 + 2i)", "(1 - 2j + 0.5k)"
- все компоненты нулевые: "0"
- NaN/Inf печатаются как "nan", "inf", "-inf"
"""

import math
from collections.abc import Sequence
from typing import Final

from src.numerics.math.numerical_safeguards import is_valid_float, round_half_up

# =============================================================================
# ПАРАМЕТРЫ ФОРМАТИРОВАНИЯ
# =============================================================================

# Количество знаков после запятой в канонической записи
FORMAT_DECIMALS: Final[int] = 5

# Граница фиксированной записи: выше неё дробная часть не представима в double
FORMAT_FIXED_POINT_LIMIT: Final[float] = 1e15


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def format_component(value: float) -> str:
    """
    Форматирование одной компоненты.

    Args:
        value: Значение компоненты

    Returns:
        Строковое представление или "" если значение округляется до нуля

    Examples:
        >>> format_component(2.0)
        '2'
        >>> format_component(-0.000004)
        ''
        >>> format_component(1.234567)
        '1.23457'
        >>> format_component(float('-inf'))
        '-inf'
    """
    if not is_valid_float(value):
        if math.isnan(value):
            return "nan"
        return "inf" if value > 0 else "-inf"

    if abs(value) >= FORMAT_FIXED_POINT_LIMIT:
        return f"{value:.15g}"

    rounded = round_half_up(value, FORMAT_DECIMALS)
    text = f"{rounded:.{FORMAT_DECIMALS}f}".rstrip("0").rstrip(".")

    if text in ("0", "-0"):
        return ""
    return text


def format_terms(parts: Sequence[tuple[float, str]]) -> str:
    """
    Каноническая запись суммы компонент.

    Args:
        parts: Пары (значение, единица), например [(1.0, ""), (2.0, "i")]

    Returns:
        Каноническая строка, например "(1 + 2i)"

    Examples:
        >>> format_terms([(3.0, ""), (-4.0, "i")])
        '(3 - 4i)'
        >>> format_terms([(0.0, ""), (2.0, "i")])
        '2i'
        >>> format_terms([(0.0, ""), (-0.0, "i")])
        '0'
    """
    terms = []
    for value, unit in parts:
        text = format_component(value)
        if text:
            terms.append((text, unit))

    if not terms:
        return "0"

    head_text, head_unit = terms[0]
    if len(terms) == 1:
        return head_text + head_unit

    chunks = [head_text + head_unit]
    for text, unit in terms[1:]:
        if text.startswith("-"):
            chunks.append(f" - {text[1:]}{unit}")
        else:
            chunks.append(f" + {text}{unit}")

    return "(" + "".join(chunks) + ")"
