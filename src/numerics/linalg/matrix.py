"""
Matrix — плотная матрица double-значений

Значения хранятся в плоском row-major буфере numpy.float64 длиной
cols * rows; ячейка (col, row) находится по индексу col + row * cols.

В отличие от числовых значений, матрица изменяема на месте
(set / fill / zero / identity). Равенство побитовое по значениям:
NaN равен NaN, а 0.0 не равен -0.0.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. cols >= 1 и rows >= 1 (иначе ValueError при создании)
2. Размер буфера не меняется после создания
3. Любой доступ за пределы матрицы → IndexError
4. a == b ⇔ одинаковая форма и одинаковые биты каждой ячейки (все NaN
   считаются одним значением)
"""

import operator
from collections.abc import Sequence
from typing import Any, Final, Optional

import numpy as np

from src.numerics.contracts.validators import validate_payload

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Толерантность по умолчанию для is_zero / is_identity
MATRIX_EPS: Final[float] = 1e-5

# Размер матрицы по умолчанию (4×4, единичная)
DEFAULT_SIZE: Final[int] = 4


# =============================================================================
# EXCEPTIONS
# =============================================================================


class NonSquareMatrixError(ValueError):
    """Операция определена только для квадратной матрицы."""

    pass


# =============================================================================
# MATRIX
# =============================================================================


class Matrix:
    """
    Плотная матрица cols × rows.

    Квадратная матрица создаётся единичной, прямоугольная нулевой.

    Пример:
        >>> m = Matrix.from_rows([[1, 8], [5, 9]])
        >>> m.get(1, 0)
        8.0
        >>> Matrix(3, 3).is_identity()
        True
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, cols: int = DEFAULT_SIZE, rows: int = DEFAULT_SIZE) -> None:
        """
        Args:
            cols: Количество столбцов (>= 1)
            rows: Количество строк (>= 1)

        Raises:
            ValueError: Если cols или rows <= 0
            TypeError: Если размеры не целые
        """
        cols = operator.index(cols)
        rows = operator.index(rows)

        if cols <= 0:
            raise ValueError(f"Cannot create Matrix with 0 or negative columns: {cols}")
        if rows <= 0:
            raise ValueError(f"Cannot create Matrix with 0 or negative rows: {rows}")

        self._cols = cols
        self._rows = rows
        self._values = np.zeros(cols * rows, dtype=np.float64)

        if self.is_square():
            self.identity()

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def from_matrix(cls, matrix: Optional["Matrix"]) -> "Matrix":
        """
        Копия матрицы.

        Raises:
            ValueError: Если matrix is None
        """
        if matrix is None:
            raise ValueError("Cannot create a copy of a None matrix")

        copy = cls(matrix.columns, matrix.rows)
        copy._values[:] = matrix._values
        return copy

    @classmethod
    def from_rows(cls, values: Optional[Sequence[Optional[Sequence[float]]]]) -> "Matrix":
        """
        Построение из двумерного литерала (список строк).

        Строки None считаются нулевыми строками; все остальные строки
        должны иметь одинаковую длину.

        Args:
            values: Список строк, например [[1, 0], None, [5, 9]]

        Returns:
            Матрица len(row) × len(values)

        Raises:
            ValueError: None/пустой ввод, все строки None, строки нулевой
                длины или строки разной длины
        """
        if values is None:
            raise ValueError("Cannot create Matrix from None")

        rows = list(values)
        if not rows:
            raise ValueError("Cannot create Matrix from empty array")

        cols = None
        for row in rows:
            if row is None:
                continue
            if cols is None:
                cols = len(row)
            elif cols != len(row):
                raise ValueError("Cannot create Matrix: all rows must have the same length.")

        if cols is None:
            raise ValueError("Cannot create Matrix from empty array (At least 1 row must be defined)")
        if cols == 0:
            raise ValueError("Cannot create Matrix from empty array (Rows have length = 0)")

        matrix = cls(cols, len(rows))
        matrix.zero()
        for index, row in enumerate(rows):
            if row is not None:
                matrix._values[index * cols : (index + 1) * cols] = np.asarray(row, dtype=np.float64)
        return matrix

    @classmethod
    def identity_matrix(cls, size: int = DEFAULT_SIZE) -> "Matrix":
        """Единичная матрица size × size."""
        return cls(size, size)

    @classmethod
    def zeros(cls, cols: int, rows: int) -> "Matrix":
        """Нулевая матрица cols × rows."""
        matrix = cls(cols, rows)
        matrix.zero()
        return matrix

    def copy(self) -> "Matrix":
        return Matrix.from_matrix(self)

    # -------------------------------------------------------------------------
    # Dimensions
    # -------------------------------------------------------------------------

    @property
    def columns(self) -> int:
        return self._cols

    @property
    def rows(self) -> int:
        return self._rows

    def contains_cell(self, col: int, row: int) -> bool:
        """Ячейка (col, row) существует в матрице."""
        return 0 <= col < self._cols and 0 <= row < self._rows

    def _shape_str(self) -> str:
        return f"[{self._cols}×{self._rows}]"

    def _cell_error(self, col: int, row: int) -> IndexError:
        return IndexError(f"Cell ({col}, {row}) is out of bounds for matrix {self._shape_str()}")

    def _index_error(self, index: int) -> IndexError:
        col, row = index % self._cols, index // self._cols
        return self._cell_error(col, row)

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def get(self, col: int, row: int) -> float:
        """
        Значение в ячейке (col, row).

        Raises:
            IndexError: Если ячейка вне матрицы
        """
        if not self.contains_cell(col, row):
            raise self._cell_error(col, row)
        return float(self._values[col + row * self._cols])

    def set(self, col: int, row: int, value: float) -> "Matrix":
        """
        Запись значения в ячейку (col, row).

        Returns:
            self (для цепочек вызовов)

        Raises:
            IndexError: Если ячейка вне матрицы
        """
        if not self.contains_cell(col, row):
            raise self._cell_error(col, row)
        self._values[col + row * self._cols] = value
        return self

    def get_index(self, index: int) -> float:
        """
        Значение по плоскому row-major индексу.

        Raises:
            IndexError: Если индекс вне [0, cols * rows)
        """
        if not 0 <= index < self._values.size:
            raise self._index_error(index)
        return float(self._values[index])

    def set_index(self, index: int, value: float) -> "Matrix":
        if not 0 <= index < self._values.size:
            raise self._index_error(index)
        self._values[index] = value
        return self

    def get_row(self, row: int) -> list[float]:
        """
        Копия строки row.

        Raises:
            IndexError: Если строка вне матрицы
        """
        if not 0 <= row < self._rows:
            raise IndexError(f"Row {row} is out of bounds for matrix {self._shape_str()}")
        start = row * self._cols
        return self._values[start : start + self._cols].tolist()

    def get_column(self, col: int) -> list[float]:
        """
        Копия столбца col.

        Raises:
            IndexError: Если столбец вне матрицы
        """
        if not 0 <= col < self._cols:
            raise IndexError(f"Column {col} is out of bounds for matrix {self._shape_str()}")
        return self._values[col :: self._cols].tolist()

    def sub_matrix(self, from_col: int, from_row: int, cols: int, rows: int) -> "Matrix":
        """
        Подматрица cols × rows, начиная с ячейки (from_col, from_row).

        Raises:
            ValueError: Если cols или rows <= 0
            IndexError: Если подматрица выходит за пределы матрицы
        """
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Cannot create subMatrix with size [{cols}×{rows}]")

        if from_col < 0 or from_row < 0 or from_col + cols > self._cols or from_row + rows > self._rows:
            raise IndexError(
                f"subMatrix starting at ({from_col}, {from_row}) with size [{cols}×{rows}] "
                f"is out of bounds for matrix {self._shape_str()}"
            )

        grid = self._values.reshape(self._rows, self._cols)
        sub = Matrix(cols, rows)
        sub._values[:] = grid[from_row : from_row + rows, from_col : from_col + cols].ravel()
        return sub

    def __getitem__(self, key: Any) -> float:
        # m[col, row] или m[index]
        if isinstance(key, tuple):
            col, row = key
            return self.get(col, row)
        return self.get_index(operator.index(key))

    def __setitem__(self, key: Any, value: float) -> None:
        if isinstance(key, tuple):
            col, row = key
            self.set(col, row, value)
        else:
            self.set_index(operator.index(key), value)

    # -------------------------------------------------------------------------
    # In-place mutation
    # -------------------------------------------------------------------------

    def fill(self, value: float) -> None:
        """Заполнение всех ячеек значением value."""
        self._values.fill(value)

    def zero(self) -> None:
        self._values.fill(0.0)

    def identity(self) -> None:
        """
        Превращение матрицы в единичную.

        Raises:
            NonSquareMatrixError: Если матрица не квадратная
        """
        if not self.is_square():
            raise NonSquareMatrixError(
                f"Cannot set this matrix to identity. Matrix is not square {self._shape_str()}"
            )
        self._values.fill(0.0)
        self._values[:: self._cols + 1] = 1.0

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def is_square(self) -> bool:
        return self._cols == self._rows

    def is_zero(self, epsilon: float = MATRIX_EPS) -> bool:
        """Все элементы по модулю меньше epsilon."""
        return bool(np.all(np.abs(self._values) < epsilon))

    def is_identity(self, epsilon: float = MATRIX_EPS) -> bool:
        """
        Матрица квадратная и отличается от единичной меньше, чем на epsilon
        в каждой ячейке.
        """
        if not self.is_square():
            return False
        identity = np.eye(self._rows, dtype=np.float64).ravel()
        return bool(np.all(np.abs(self._values - identity) < epsilon))

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_rows(self) -> list[list[float]]:
        """Значения как список строк."""
        return self._values.reshape(self._rows, self._cols).tolist()

    def to_numpy(self) -> np.ndarray:
        """Копия значений как массив формы (rows, cols)."""
        return self._values.reshape(self._rows, self._cols).copy()

    def to_payload(self) -> dict[str, Any]:
        """JSON-совместимое представление (контракт matrix.json)."""
        return {
            "type": "matrix",
            "cols": self._cols,
            "rows": self._rows,
            "values": self._values.tolist(),
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Matrix":
        """
        Построение из payload с валидацией контракта.

        Raises:
            ValidationError: Если payload не соответствует matrix.json
            ValueError: Если len(values) != cols * rows
        """
        validate_payload(data, expected_type="matrix")

        cols, rows, values = data["cols"], data["rows"], data["values"]
        if len(values) != cols * rows:
            raise ValueError(
                f"Matrix payload has {len(values)} values, expected {cols * rows} for [{cols}×{rows}]"
            )

        matrix = cls(cols, rows)
        matrix._values[:] = np.asarray(values, dtype=np.float64)
        return matrix

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self._cols != other._cols or self._rows != other._rows:
            return False

        mine, theirs = self._values, other._values
        same_bits = mine.view(np.int64) == theirs.view(np.int64)
        both_nan = np.isnan(mine) & np.isnan(theirs)
        return bool(np.all(same_bits | both_nan))

    def __repr__(self) -> str:
        return f"Matrix(cols={self._cols}, rows={self._rows}, values={self.to_rows()})"

    def __str__(self) -> str:
        cells = [[repr(value) for value in row] for row in self.to_rows()]
        widths = [max(len(row[col]) for row in cells) for col in range(self._cols)]

        lines = []
        for index, row in enumerate(cells):
            prefix = "Matrix [" if index == 0 else "       ["
            body = ", ".join(cell.rjust(widths[col]) for col, cell in enumerate(row))
            lines.append(f"{prefix}{body}]")
        return "\n".join(lines)
