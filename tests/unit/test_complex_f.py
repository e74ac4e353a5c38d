"""
Тесты для ComplexF (комплексное число одинарной точности)

Проверяет:
1. Округление компонент до float32 при создании
2. Тип результата операций (точность получателя)
3. Толерантности сравнения float32
4. Переполнение float32 → inf
"""

import math

import numpy as np
import pytest

from src.numerics.numbers import Complex, ComplexF, narrow_to_float32

# =============================================================================
# ТЕСТЫ ОКРУГЛЕНИЯ
# =============================================================================


class TestNarrowing:
    """Компоненты хранятся с точностью float32"""

    def test_narrow_to_float32(self) -> None:
        """Округление до ближайшего float32"""
        assert narrow_to_float32(0.1) == float(np.float32(0.1))
        assert narrow_to_float32(0.1) != 0.1
        assert narrow_to_float32(1.5) == 1.5

    def test_overflow_becomes_inf(self) -> None:
        """Значение вне диапазона float32 → ±inf"""
        assert narrow_to_float32(1e39) == math.inf
        assert narrow_to_float32(-1e39) == -math.inf

    def test_components_narrowed_on_construction(self) -> None:
        """Конструктор округляет обе компоненты"""
        c = ComplexF(0.1, 1 / 3)
        assert c.r == float(np.float32(0.1))
        assert c.i == float(np.float32(1 / 3))

    def test_non_finite_preserved(self) -> None:
        """inf/nan сохраняются"""
        assert ComplexF.infinity().r == math.inf
        assert math.isnan(ComplexF(math.nan, 0).r)

    def test_to_numpy(self) -> None:
        """Значение как numpy.complex64"""
        value = ComplexF(1.5, -2).to_numpy()
        assert value.dtype == np.complex64
        assert value == np.complex64(1.5 - 2j)


# =============================================================================
# ТЕСТЫ ТИПА РЕЗУЛЬТАТА
# =============================================================================


class TestResultWidth:
    """Результат имеет точность получателя"""

    def test_operations_return_complex_f(self) -> None:
        """Все операции ComplexF возвращают ComplexF"""
        z = ComplexF(1, 2)
        assert type(z.add(1)) is ComplexF
        assert type(z.mul(z)) is ComplexF
        assert type(z.div(0)) is ComplexF
        assert type(z.pow(2)) is ComplexF
        assert type(z.root(3)) is ComplexF
        assert type(z.exp()) is ComplexF
        assert type(z.sin()) is ComplexF
        assert type(z.conjugate()) is ComplexF
        assert type(-z) is ComplexF
        assert type(ComplexF.one()) is ComplexF

    def test_mixed_width_follows_receiver(self) -> None:
        """Complex + ComplexF → Complex, ComplexF + Complex → ComplexF"""
        assert type(Complex(1, 2) + ComplexF(1, 2)) is Complex
        assert type(ComplexF(1, 2) + Complex(1, 2)) is ComplexF

    def test_reflected_operator_keeps_width(self) -> None:
        """2 * ComplexF → ComplexF"""
        assert type(2 * ComplexF(1, 2)) is ComplexF
        assert type(2 - ComplexF(1, 2)) is ComplexF

    def test_results_are_single_precision(self) -> None:
        """Результат операции округлён до float32"""
        result = ComplexF(1, 0).div(3)
        assert result.r == float(np.float32(1 / 3))

    def test_from_complex_narrows(self) -> None:
        """Конвертация Complex → ComplexF"""
        converted = ComplexF.from_complex(Complex(0.1, 0.2))
        assert converted.r == float(np.float32(0.1))
        assert converted.i == float(np.float32(0.2))


# =============================================================================
# ТЕСТЫ СРАВНЕНИЯ
# =============================================================================


class TestSinglePrecisionComparison:
    """Толерантности сравнения соответствуют float32"""

    def test_equal_within_float32_tolerance(self) -> None:
        """ComplexF сравнивается с толерантностью float32"""
        assert ComplexF(1.0, 0) == Complex(1.000001, 0)
        assert ComplexF(1.0, 0) != Complex(1.001, 0)

    def test_double_receiver_uses_double_tolerance(self) -> None:
        """Complex сравнивается с толерантностью double"""
        assert Complex(1.0, 0) != ComplexF(1.000001, 0)

    def test_root_then_pow(self) -> None:
        """root/pow round-trip в пределах точности float32"""
        z = ComplexF(3, 4)
        assert z.root(3).pow(3) == z

    def test_analytic_functions_close_to_double(self) -> None:
        """Аналитические функции близки к результату двойной точности"""
        z = ComplexF(0.5, -1.25)
        double = Complex(z.r, z.i)
        assert z.exp() == double.exp()
        assert z.ln() == double.ln()
        assert z.cos() == double.cos()

    def test_tangents_saturate_before_float32_overflow(self) -> None:
        """tan(100i) = i и tanh(100) = 1, хотя cosh(100) не помещается во float32"""
        assert ComplexF(0, 100).tan() == ComplexF(0, 1)
        assert ComplexF(100, 0).tanh() == ComplexF(1, 0)
        assert ComplexF(-100, 0.5).tanh() == ComplexF(-1, 0)
        assert type(ComplexF(0, 100).tan()) is ComplexF


# =============================================================================
# ТЕСТЫ ФОРМАТИРОВАНИЯ И PAYLOAD
# =============================================================================


class TestComplexFFormatting:
    """Форматирование и payload"""

    def test_str(self) -> None:
        """0.1f печатается как 0.1 (округление до 5 знаков)"""
        assert str(ComplexF(0.1, -0.2)) == "(0.1 - 0.2i)"

    def test_payload_type(self) -> None:
        """Тип payload — complex_f"""
        payload = ComplexF(1.5, 2).to_payload()
        assert payload == {"type": "complex_f", "r": 1.5, "i": 2.0}
        assert ComplexF.from_payload(payload) == ComplexF(1.5, 2)

    def test_double_precision_payload_rejected(self) -> None:
        """complex payload не восстанавливается как ComplexF"""
        with pytest.raises(ValueError, match="Expected payload type 'complex_f', got 'complex'"):
            ComplexF.from_payload({"type": "complex", "r": 1.5, "i": 2})

    def test_unhashable(self) -> None:
        """Экземпляры не хешируются"""
        with pytest.raises(TypeError):
            hash(ComplexF(1, 2))
