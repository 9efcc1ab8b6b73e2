from enum import Enum
from typing import Dict


class DataType(Enum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"

    def __str__(self) -> str:
        return self.value

    @property
    def rust_name(self) -> str:
        return RUST_TYPES[self]


RUST_TYPES: Dict[DataType, str] = {
    DataType.INT: "i32",
    DataType.FLOAT: "f64",
    DataType.BOOL: "bool",
    DataType.STRING: "String",
}
