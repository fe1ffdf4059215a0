from typing import Any, List, Optional


from .enums import FirestoreOperators


class FirestoreField:
    """
    Class-level stand-in for a document field, used to build query filters.

    Examples
    --------
    >>> Thread.parent_id == None
    ('parent_id', FirestoreOperators.EQ, None)

    On an **instance** the stored value is returned; on the **class** the
    descriptor itself is returned so comparisons produce filter tuples.
    """

    def __init__(self, field_name: str, attribute: Optional[str] = None):
        self.field_name = field_name
        self.attribute = attribute or field_name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        # Partial (projected) documents lack unselected fields.
        return instance.__dict__.get(self.attribute)

    def __str__(self) -> str:          # noqa: DunderStr
        return self.field_name

    __repr__ = __str__

    def __hash__(self) -> int:         # noqa: DunderHash
        return hash(self.field_name)

    # Comparison operators build (field, operator, value) tuples

    def __eq__(self, other):           # type: ignore[override]
        return (self.field_name, FirestoreOperators.EQ, other)

    def __ne__(self, other):           # type: ignore[override]
        return (self.field_name, FirestoreOperators.NE, other)

    def __lt__(self, other):
        return (self.field_name, FirestoreOperators.LT, other)

    def __le__(self, other):
        return (self.field_name, FirestoreOperators.LTE, other)

    def __gt__(self, other):
        return (self.field_name, FirestoreOperators.GT, other)

    def __ge__(self, other):
        return (self.field_name, FirestoreOperators.GTE, other)

    def in_(self, values: List[Any]) -> tuple:
        return (self.field_name, FirestoreOperators.IN, values)

    def not_in_(self, values: List[Any]) -> tuple:
        return (self.field_name, FirestoreOperators.NOT_IN, values)

    def array_contains(self, value: Any) -> tuple:
        """Filter documents whose array field holds ``value`` (e.g. a member id)."""
        return (self.field_name, FirestoreOperators.ARRAY_CONTAINS, value)
