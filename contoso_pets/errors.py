# contoso_pets/errors.py
from typing import Any, Dict, Iterable, List, Mapping


def errors_by_field(errors: Iterable[Mapping[str, Any]]) -> Dict[str, List[str]]:
    """
    Group pydantic error dicts by field name.

    The location prefix added by FastAPI ("body", "path", ...) is dropped so
    that the keys are plain lowercase field names like "price".
    """
    out: Dict[str, List[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        field = ".".join(loc).lower() or "body"
        out.setdefault(field, []).append(err.get("msg", "invalid value"))
    return out


# Raised by the store when a candidate product is rejected.
# The HTTP layer turns these into 400 responses.
class ProductValidationError(Exception):
    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__("invalid product: " + ", ".join(sorted(errors)))

    @classmethod
    def from_pydantic(cls, exc) -> "ProductValidationError":
        return cls(errors_by_field(exc.errors()))


class IdMismatchError(ProductValidationError):
    """The id in the path does not match the id in the body."""

    def __init__(self, path_id: int, body_id: int):
        self.path_id = path_id
        self.body_id = body_id
        super().__init__({"id": [f"id {body_id} does not match path id {path_id}"]})
