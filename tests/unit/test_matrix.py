"""
Тесты для Matrix

Проверяет:
1. Конструкторы (единичная/нулевая, from_rows, from_matrix)
2. Доступ к элементам и границы
3. Подматрицы, строки, столбцы
4. Изменение на месте (fill/zero/identity)
5. Предикаты is_zero/is_identity
6. Побитовое равенство и форматирование
7. Payload
"""

import math

import numpy as np
import pytest
from jsonschema import ValidationError

from src.numerics.linalg import MATRIX_EPS, Matrix, NonSquareMatrixError


@pytest.fixture
def grid() -> Matrix:
    """Матрица 2×3: [[1, 2], [3, 4], [5, 6]]"""
    return Matrix.from_rows([[1, 2], [3, 4], [5, 6]])


# =============================================================================
# ТЕСТЫ КОНСТРУКТОРОВ
# =============================================================================


class TestMatrixConstruction:
    """Тесты конструкторов и фабрик"""

    def test_default_is_identity_4x4(self) -> None:
        """Matrix() — единичная 4×4"""
        m = Matrix()
        assert m.columns == 4
        assert m.rows == 4
        assert m.is_identity()

    def test_square_is_identity(self) -> None:
        """Квадратная матрица создаётся единичной"""
        assert Matrix(3, 3).is_identity()
        assert Matrix.identity_matrix(5).is_identity()

    def test_rectangular_is_zero(self) -> None:
        """Прямоугольная матрица создаётся нулевой"""
        m = Matrix(3, 2)
        assert m.is_zero()
        assert not m.is_square()

    def test_zeros_factory(self) -> None:
        """Matrix.zeros даёт нулевую матрицу любой формы"""
        assert Matrix.zeros(3, 3).is_zero()
        assert Matrix.zeros(1, 4).rows == 4

    @pytest.mark.parametrize("cols, rows", [(0, 3), (-1, 3)])
    def test_non_positive_columns_raise(self, cols: int, rows: int) -> None:
        """Неположительное число столбцов"""
        with pytest.raises(ValueError, match="0 or negative columns"):
            Matrix(cols, rows)

    def test_non_positive_rows_raise(self) -> None:
        """Неположительное число строк"""
        with pytest.raises(ValueError, match="0 or negative rows"):
            Matrix(3, 0)

    def test_non_integer_dimensions_raise(self) -> None:
        """Размеры должны быть целыми"""
        with pytest.raises(TypeError):
            Matrix(2.5, 2)

    def test_from_matrix_copies(self, grid: Matrix) -> None:
        """Копия независима от оригинала"""
        copy = Matrix.from_matrix(grid)
        assert copy == grid
        copy.set(0, 0, 100)
        assert grid.get(0, 0) == 1.0
        assert grid.copy() == grid

    def test_from_matrix_none_raises(self) -> None:
        """Копия None невозможна"""
        with pytest.raises(ValueError):
            Matrix.from_matrix(None)


class TestFromRows:
    """Тесты Matrix.from_rows"""

    def test_shape_and_values(self, grid: Matrix) -> None:
        """Столбцы — длина строки, строки — число строк"""
        assert grid.columns == 2
        assert grid.rows == 3
        assert grid.get(1, 0) == 2.0
        assert grid.get(0, 2) == 5.0

    def test_none_rows_are_zero(self) -> None:
        """Строка None — нулевая строка"""
        m = Matrix.from_rows([[1, 2], None, [3, 4]])
        assert m.rows == 3
        assert m.get_row(1) == [0.0, 0.0]
        assert m.get_row(2) == [3.0, 4.0]

    def test_square_literal_is_not_forced_to_identity(self) -> None:
        """Значения литерала не перезаписываются единичной матрицей"""
        m = Matrix.from_rows([[0, 0], [0, 0]])
        assert m.is_zero()

    def test_none_input_raises(self) -> None:
        """None"""
        with pytest.raises(ValueError, match="from None"):
            Matrix.from_rows(None)

    def test_empty_input_raises(self) -> None:
        """Пустой список"""
        with pytest.raises(ValueError, match="empty array"):
            Matrix.from_rows([])

    def test_all_none_rows_raise(self) -> None:
        """Все строки None"""
        with pytest.raises(ValueError, match="At least 1 row"):
            Matrix.from_rows([None, None])

    def test_zero_length_rows_raise(self) -> None:
        """Строки нулевой длины"""
        with pytest.raises(ValueError, match="length = 0"):
            Matrix.from_rows([[], []])

    def test_ragged_rows_raise(self) -> None:
        """Строки разной длины"""
        with pytest.raises(ValueError, match="same length"):
            Matrix.from_rows([[1, 2], [3]])


# =============================================================================
# ТЕСТЫ ДОСТУПА К ЭЛЕМЕНТАМ
# =============================================================================


class TestElementAccess:
    """Тесты get/set и индексации"""

    def test_set_is_chainable(self) -> None:
        """set возвращает self"""
        m = Matrix(2, 2)
        assert m.set(0, 0, 5).set(1, 1, 6) is m
        assert m.get(0, 0) == 5.0
        assert m.get(1, 1) == 6.0

    def test_flat_index_is_row_major(self, grid: Matrix) -> None:
        """Индекс ячейки (col, row) = col + row · cols"""
        assert grid.get_index(3) == 4.0
        assert grid.get_index(5) == 6.0
        grid.set_index(2, -1)
        assert grid.get(0, 1) == -1.0

    def test_subscript(self, grid: Matrix) -> None:
        """m[col, row] и m[index]"""
        assert grid[1, 2] == 6.0
        assert grid[3] == 4.0
        grid[0, 0] = 10
        grid[5] = 60
        assert grid.get(0, 0) == 10.0
        assert grid.get(1, 2) == 60.0

    def test_cell_out_of_bounds(self, grid: Matrix) -> None:
        """Ячейка вне матрицы → IndexError"""
        with pytest.raises(IndexError, match=r"Cell \(2, 0\) is out of bounds for matrix \[2×3\]"):
            grid.get(2, 0)
        with pytest.raises(IndexError):
            grid.set(0, -1, 1.0)
        with pytest.raises(IndexError):
            grid[0, 3]

    def test_index_out_of_bounds(self, grid: Matrix) -> None:
        """Плоский индекс вне матрицы → IndexError"""
        with pytest.raises(IndexError, match=r"Cell \(0, 3\)"):
            grid.get_index(6)
        with pytest.raises(IndexError):
            grid.set_index(-1, 0.0)

    def test_contains_cell(self, grid: Matrix) -> None:
        """Проверка существования ячейки"""
        assert grid.contains_cell(1, 2)
        assert not grid.contains_cell(2, 2)
        assert not grid.contains_cell(-1, 0)


class TestRowsColumnsSubMatrix:
    """Тесты строк, столбцов и подматриц"""

    def test_get_row_and_column(self, grid: Matrix) -> None:
        """Строка и столбец как списки"""
        assert grid.get_row(0) == [1.0, 2.0]
        assert grid.get_column(1) == [2.0, 4.0, 6.0]

    def test_row_column_are_copies(self, grid: Matrix) -> None:
        """Изменение списка не меняет матрицу"""
        row = grid.get_row(0)
        row[0] = 99.0
        assert grid.get(0, 0) == 1.0

    def test_row_column_out_of_bounds(self, grid: Matrix) -> None:
        """Строка/столбец вне матрицы"""
        with pytest.raises(IndexError, match="Row 3"):
            grid.get_row(3)
        with pytest.raises(IndexError, match="Column 2"):
            grid.get_column(2)

    def test_sub_matrix(self, grid: Matrix) -> None:
        """Подматрица"""
        sub = grid.sub_matrix(1, 1, 1, 2)
        assert sub.columns == 1
        assert sub.rows == 2
        assert sub.to_rows() == [[4.0], [6.0]]

    def test_sub_matrix_from_origin(self, grid: Matrix) -> None:
        """Подматрица, начинающаяся в (0, 0)"""
        assert grid.sub_matrix(0, 0, 2, 2) == Matrix.from_rows([[1, 2], [3, 4]])

    def test_sub_matrix_whole(self, grid: Matrix) -> None:
        """Подматрица во всю матрицу равна ей"""
        assert grid.sub_matrix(0, 0, 2, 3) == grid

    def test_sub_matrix_out_of_bounds(self, grid: Matrix) -> None:
        """Подматрица за пределами"""
        with pytest.raises(IndexError, match="out of bounds"):
            grid.sub_matrix(1, 0, 2, 1)
        with pytest.raises(IndexError):
            grid.sub_matrix(-1, 0, 1, 1)

    def test_sub_matrix_invalid_size(self, grid: Matrix) -> None:
        """Неположительный размер подматрицы"""
        with pytest.raises(ValueError):
            grid.sub_matrix(0, 0, 0, 1)


# =============================================================================
# ТЕСТЫ ИЗМЕНЕНИЯ НА МЕСТЕ
# =============================================================================


class TestInPlaceMutation:
    """Тесты fill/zero/identity"""

    def test_fill(self, grid: Matrix) -> None:
        """Все ячейки получают значение"""
        grid.fill(7)
        assert grid.to_rows() == [[7.0, 7.0], [7.0, 7.0], [7.0, 7.0]]

    def test_fill_zero_is_zero(self) -> None:
        """Матрица, заполненная нулём, нулевая"""
        m = Matrix(3, 3)
        m.fill(0)
        assert m.is_zero()

    def test_zero(self, grid: Matrix) -> None:
        """zero() обнуляет матрицу"""
        grid.zero()
        assert grid.is_zero()

    def test_identity(self) -> None:
        """identity() делает квадратную матрицу единичной"""
        m = Matrix.from_rows([[1, 2], [3, 4]])
        m.identity()
        assert m.is_identity()

    def test_identity_non_square_raises(self, grid: Matrix) -> None:
        """identity() на прямоугольной матрице"""
        with pytest.raises(NonSquareMatrixError, match="not square"):
            grid.identity()

    def test_non_square_error_is_value_error(self) -> None:
        """NonSquareMatrixError — подкласс ValueError"""
        assert issubclass(NonSquareMatrixError, ValueError)


# =============================================================================
# ТЕСТЫ ПРЕДИКАТОВ
# =============================================================================


class TestPredicates:
    """Тесты is_zero/is_identity"""

    def test_default_epsilon(self) -> None:
        """Толерантность по умолчанию 1e-5"""
        assert MATRIX_EPS == 1e-5

    def test_is_zero_strict_epsilon(self) -> None:
        """Сравнение строгое: |v| < epsilon"""
        m = Matrix(2, 2)
        m.fill(1e-6)
        assert m.is_zero()
        m.fill(2e-5)
        assert not m.is_zero()
        assert m.is_zero(epsilon=1e-4)

    def test_is_identity_with_noise(self) -> None:
        """Шум меньше epsilon допустим"""
        m = Matrix(3, 3)
        m.set(0, 1, 1e-6)
        assert m.is_identity()
        m.set(2, 2, 1.001)
        assert not m.is_identity()

    def test_rectangular_is_never_identity(self) -> None:
        """Прямоугольная матрица не единичная"""
        assert not Matrix(2, 3).is_identity()


# =============================================================================
# ТЕСТЫ РАВЕНСТВА И ФОРМАТИРОВАНИЯ
# =============================================================================


class TestEqualityAndFormatting:
    """Тесты == и str"""

    def test_exact_equality(self) -> None:
        """Равенство точное"""
        a = Matrix(2, 2)
        b = Matrix.identity_matrix(2)
        assert a == b
        b.set(0, 0, 1 + 1e-12)
        assert a != b

    def test_nan_cells_equal(self) -> None:
        """NaN в одной и той же ячейке не нарушает равенство"""
        a = Matrix.zeros(2, 2).set(1, 0, math.nan)
        b = Matrix.zeros(2, 2).set(1, 0, math.nan)
        assert a == b
        assert a == a.copy()
        assert a != Matrix.zeros(2, 2)

    def test_signed_zero_distinguished(self) -> None:
        """0.0 и -0.0 различаются"""
        a = Matrix.zeros(2, 2)
        b = Matrix.zeros(2, 2).set(0, 1, -0.0)
        assert a != b
        assert b == Matrix.from_matrix(b)

    def test_shape_matters(self) -> None:
        """Матрицы разной формы не равны"""
        assert Matrix.zeros(2, 3) != Matrix.zeros(3, 2)

    def test_not_equal_to_other_types(self) -> None:
        """Сравнение с другими типами"""
        assert Matrix(1, 1) != 1.0

    def test_unhashable(self) -> None:
        """Изменяемая матрица не хешируется"""
        with pytest.raises(TypeError):
            hash(Matrix(2, 2))

    def test_str_aligned_columns(self) -> None:
        """Столбцы выровнены по правому краю"""
        m = Matrix.from_rows([[1, 10], [100, 2]])
        assert str(m) == "Matrix [  1.0, 10.0]\n       [100.0,  2.0]"

    def test_str_identity(self) -> None:
        """Единичная 2×2"""
        assert str(Matrix(2, 2)) == "Matrix [1.0, 0.0]\n       [0.0, 1.0]"


# =============================================================================
# ТЕСТЫ КОНВЕРТАЦИИ
# =============================================================================


class TestConversion:
    """Тесты to_rows/to_numpy/payload"""

    def test_to_numpy(self, grid: Matrix) -> None:
        """Массив формы (rows, cols), копия"""
        array = grid.to_numpy()
        assert array.shape == (3, 2)
        assert array.dtype == np.float64
        array[0, 0] = 50.0
        assert grid.get(0, 0) == 1.0

    def test_payload_round_trip(self, grid: Matrix) -> None:
        """to_payload → from_payload"""
        payload = grid.to_payload()
        assert payload == {"type": "matrix", "cols": 2, "rows": 3, "values": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]}
        assert Matrix.from_payload(payload) == grid

    def test_payload_length_mismatch(self) -> None:
        """len(values) != cols · rows"""
        payload = {"type": "matrix", "cols": 2, "rows": 2, "values": [1.0, 2.0, 3.0]}
        with pytest.raises(ValueError, match="expected 4"):
            Matrix.from_payload(payload)

    def test_payload_schema_violation(self) -> None:
        """Нарушение контракта matrix.json"""
        with pytest.raises(ValidationError):
            Matrix.from_payload({"type": "matrix", "cols": 0, "rows": 1, "values": [1.0]})

    def test_payload_of_other_type_rejected(self) -> None:
        """Payload другого типа не восстанавливается как Matrix"""
        with pytest.raises(ValidationError):
            Matrix.from_payload({"type": "quaternion", "r": 1.0, "i": 0.0, "j": 0.0, "k": 0.0})
