"""
Contract Validation Module

Модуль для валидации JSON payload-представлений числовых значений.
"""

from .validators import (
    PAYLOAD_SCHEMAS,
    ComplexValidator,
    ContractValidator,
    MatrixValidator,
    PayloadTypeError,
    QuaternionValidator,
    SchemaLoader,
    get_validator,
    schema_for_type,
    validate_complex,
    validate_matrix,
    validate_payload,
    validate_quaternion,
)

__all__ = [
    # Parameters
    "PAYLOAD_SCHEMAS",
    # Exceptions
    "PayloadTypeError",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ComplexValidator",
    "QuaternionValidator",
    "MatrixValidator",
    # Functions
    "get_validator",
    "schema_for_type",
    "validate_payload",
    "validate_complex",
    "validate_quaternion",
    "validate_matrix",
]
