from enum import Enum


class FirestoreOperators(str,Enum):
    LT = "<"
    LTE = "<="
    EQ = "=="
    NE = "!="
    GT = ">"
    GTE = ">="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array_contains"
    ARRAY_CONTAINS_ANY = "array_contains_any"

class OrderByDirection(str,Enum):
    DESCENDING="DESCENDING"
    ASCENDING="ASCENDING"
    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, value) -> "OrderByDirection":
        """Accept ``"asc"``/``"desc"`` shorthands as well as enum members."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized in ("asc", "ascending", "1"):
            return cls.ASCENDING
        if normalized in ("desc", "descending", "-1"):
            return cls.DESCENDING
        raise ValueError(f"Unknown sort order: {value!r}")
