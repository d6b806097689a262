"""
Helpers shared by the page field mappings.
"""

from typing import Callable, Type, TypeVar

from pydantic import BaseModel

from ..accessor import FieldAccessor
from ..exceptions import FieldError, NotFoundError
from ..schemas import FieldSpec

RecordT = TypeVar("RecordT", bound=BaseModel)


# --- Text transforms for FieldSpec.transform ---

def nth_field(index: int) -> Callable[[str], str]:
    """Whitespace-separated field `index` of the text, or "" if there are fewer."""
    def transform(text: str) -> str:
        fields = text.split()
        return fields[index] if len(fields) > index else ""
    return transform


first_field = nth_field(0)


def strip_suffix(suffix: str) -> Callable[[str], str]:
    def transform(text: str) -> str:
        return text.removesuffix(suffix).strip()
    return transform


def strip_prefix(prefix: str) -> Callable[[str], str]:
    def transform(text: str) -> str:
        return text.removeprefix(prefix).strip()
    return transform


# --- Structural reads ---

def require_node(accessor: FieldAccessor, context, selector: str, label: str):
    """Return the first element matching selector; a page without it cannot be parsed."""
    node, found = accessor.node(context, selector)
    if not found:
        raise FieldError(label, NotFoundError(selector))
    return node


def read_records(
    accessor: FieldAccessor,
    context,
    selector: str,
    specs: tuple[FieldSpec, ...],
    model: Type[RecordT],
    base: str,
    label: str
) -> list[RecordT]:
    """Build one record per element matching selector, e.g. one Author per list item."""
    records = []
    for node in accessor.iter_nodes(context, selector):
        try:
            values = accessor.read_all(node, specs, base)
        except FieldError as e:
            raise FieldError(f"{label}/{e.field}", e.cause) from e
        records.append(model(**values))
    return records
