"""
Exception and Error Definitions Module

Defines the exception hierarchy for typed-data hashing, schema validation,
configuration loading and router oracle calls. All exceptions inherit from
TypedDataError for unified exception handling.

Exception Hierarchy:
    TypedDataError (root)
    ├── SchemaError
    │   ├── UndefinedTypeError
    │   ├── CyclicTypeError
    │   └── ValueShapeError
    ├── ConfigurationError
    └── OracleError
"""

from typing import Optional, Sequence


class TypedDataError(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions should inherit from this class to enable
    unified exception handling and centralized error processing.
    """
    pass


class SchemaError(TypedDataError):
    """
    Raised when a type schema is inconsistent or a value does not conform to it.

    This includes scenarios such as:
    - Malformed type strings (``uint7``, ``bytes33``, ``Foo[``)
    - Duplicate field names inside a struct
    - Missing or extra fields in a struct value
    - Integers outside the declared bit width
    - Addresses or fixed bytes of the wrong length

    Attributes:
        path: Location of the offending value inside the value tree
              (e.g. ``LimitOrder.input.tokenAmount``), when known.
    """

    def __init__(self, message: str, path: Optional[Sequence[str]] = None):
        self.path = ".".join(path) if path else None
        if self.path:
            message = f"{self.path}: {message}"
        super().__init__(message)


class UndefinedTypeError(SchemaError):
    """
    Raised when a field references a struct type that the schema does not define.
    """
    pass


class CyclicTypeError(SchemaError):
    """
    Raised when struct types reference each other (directly or transitively)
    in a cycle.

    Attributes:
        cycle: Struct names forming the cycle, first name repeated at the end.
    """

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(f"Circular type reference: {' -> '.join(self.cycle)}")


class ValueShapeError(SchemaError):
    """
    Raised when a value tree does not match the shape of its declared type.

    This includes scenarios such as:
    - Missing or unexpected struct fields
    - Wrong arity for fixed-length arrays
    - Non-mapping value for a struct, non-sequence value for an array
    """
    pass


class ConfigurationError(TypedDataError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Invalid router address in the environment
    - Empty RPC URL
    """
    pass


class OracleError(TypedDataError):
    """
    Raised when the router oracle call (RPC ``eth_call``) fails.

    This includes scenarios such as:
    - RPC call timeout
    - Network connectivity issues
    - Contract call revert
    - Unexpected return payload

    Attributes:
        function: Router view function that was called
    """

    def __init__(self, message: str, function: Optional[str] = None):
        self.function = function
        super().__init__(message)
