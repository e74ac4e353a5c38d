"""
JSON Schema Contract Validators

Модуль для валидации payload-представлений числовых значений согласно
формальным JSON Schema контрактам (Draft 2020-12).

Каждый payload несёт поле "type", по которому выбирается схема:
- "complex", "complex_f" → complex.json (Complex, ComplexF)
- "quaternion" → quaternion.json (Quaternion)
- "matrix" → matrix.json (Matrix)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Payload восстанавливается только типом, указанным в поле "type":
   Complex не принимает complex_f payload и наоборот (PayloadTypeError)
2. Схемы проходят meta-validation при загрузке
3. Валидатор каждой схемы создаётся один раз
"""

import json
from pathlib import Path
from typing import Any, Dict, Final, Optional, Type

import jsonschema
from jsonschema import Draft202012Validator

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Тип payload → имя схемы
PAYLOAD_SCHEMAS: Final[Dict[str, str]] = {
    "complex": "complex",
    "complex_f": "complex",
    "quaternion": "quaternion",
    "matrix": "matrix",
}


# =============================================================================
# EXCEPTIONS
# =============================================================================


class PayloadTypeError(ValueError):
    """Поле type payload не совпадает с восстанавливаемым типом."""

    pass

# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются вместе с пакетом в каталоге schema/ рядом с модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'complex')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации (ValidationError)."""
        return self.validator.iter_errors(data)


class ComplexValidator(ContractValidator):
    """Валидатор для complex контракта (Complex и ComplexF)."""

    def __init__(self):
        super().__init__("complex")


class QuaternionValidator(ContractValidator):
    """Валидатор для quaternion контракта."""

    def __init__(self):
        super().__init__("quaternion")


class MatrixValidator(ContractValidator):
    """
    Валидатор для matrix контракта.

    Схема не может выразить len(values) == cols * rows, эта проверка
    выполняется в Matrix.from_payload.
    """

    def __init__(self):
        super().__init__("matrix")


# Имя схемы → класс валидатора
_VALIDATOR_CLASSES: Final[Dict[str, Type[ContractValidator]]] = {
    "complex": ComplexValidator,
    "quaternion": QuaternionValidator,
    "matrix": MatrixValidator,
}

# Кэш созданных валидаторов
_VALIDATORS: Dict[str, ContractValidator] = {}


def get_validator(schema_name: str) -> ContractValidator:
    """
    Валидатор схемы, создаваемый один раз на процесс.

    Raises:
        KeyError: Если схема неизвестна
    """
    validator = _VALIDATORS.get(schema_name)
    if validator is None:
        validator = _VALIDATOR_CLASSES[schema_name]()
        _VALIDATORS[schema_name] = validator
    return validator


def schema_for_type(payload_type: Any) -> str:
    """
    Имя схемы для типа payload.

    Raises:
        ValueError: Если тип не зарегистрирован в PAYLOAD_SCHEMAS
    """
    if not isinstance(payload_type, str) or payload_type not in PAYLOAD_SCHEMAS:
        raise ValueError(
            f"Unknown payload type: {payload_type!r} (expected one of {sorted(PAYLOAD_SCHEMAS)})"
        )
    return PAYLOAD_SCHEMAS[payload_type]


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_payload(data: Dict[str, Any], expected_type: Optional[str] = None) -> str:
    """
    Валидация payload с выбором схемы по типу.

    Без expected_type схема выбирается по полю data["type"]. С expected_type
    payload валидируется схемой этого типа, а затем поле type сверяется
    с ожидаемым: complex.json допускает оба варианта точности, поэтому
    только эта проверка отличает Complex от ComplexF.

    Args:
        data: Payload
        expected_type: Тип восстанавливаемого значения (например, 'complex_f')

    Returns:
        Тип payload

    Raises:
        ValueError: Если тип payload неизвестен
        ValidationError: Если данные не соответствуют схеме
        PayloadTypeError: Если data["type"] != expected_type

    Examples:
        >>> validate_payload({"type": "complex_f", "r": 1.0, "i": 0.0})
        'complex_f'
    """
    if expected_type is None:
        payload_type = data.get("type") if isinstance(data, dict) else None
    else:
        payload_type = expected_type

    get_validator(schema_for_type(payload_type)).validate(data)

    actual_type = data["type"]
    if expected_type is not None and actual_type != expected_type:
        raise PayloadTypeError(f"Expected payload type '{expected_type}', got '{actual_type}'")
    return actual_type


def validate_complex(data: Dict[str, Any]) -> None:
    """
    Валидация complex payload (любой точности).

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    get_validator("complex").validate(data)


def validate_quaternion(data: Dict[str, Any]) -> None:
    """
    Валидация quaternion payload.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    get_validator("quaternion").validate(data)


def validate_matrix(data: Dict[str, Any]) -> None:
    """
    Валидация matrix payload.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    get_validator("matrix").validate(data)
