from .linalg import axpy_into, matmul_into, scaled_add_into
from .table import OPERATION_TABLE, OperationPair, lookup

__all__ = [
    "OPERATION_TABLE",
    "OperationPair",
    "axpy_into",
    "lookup",
    "matmul_into",
    "scaled_add_into",
]
