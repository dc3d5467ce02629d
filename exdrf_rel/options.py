import logging
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Tuple

from attrs import define, field
from sqlalchemy import Select, select

if TYPE_CHECKING:
    from exdrf_rel.context import RenderContext
    from exdrf_rel.typedefs import HasQueryAll, QueryTransform

logger = logging.getLogger(__name__)


@define(frozen=True)
class Candidate:
    """A related record that can be selected in the editors.

    Attributes:
        label: The text shown for the option.
        id: The identifier stored in the foreign key when selected.
        record: The record the candidate was created from. It does not take
            part in comparisons.
    """

    label: Any
    id: Any
    record: Any = field(default=None, eq=False, repr=False)

    def as_tuple(self) -> Tuple[Any, Any]:
        """Return the (label, id) pair."""
        return self.label, self.id

    def matches(self, value: Any) -> bool:
        """Tell if a submitted value selects this candidate.

        Browsers submit strings so the comparison is textual.
        """
        if value is None:
            return False
        return str(self.id) == str(value)


def record_attr(record: Any, name: str) -> Any:
    """Read an attribute of a record that may also be a plain mapping.

    Missing attributes are reported as None.
    """
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def base_query(target: Any) -> Select:
    """The query of all records in the target collection."""
    return select(target)


def load_options(
    repo: "HasQueryAll",
    target: Any,
    query_transform: Optional["QueryTransform"],
    display_attribute: str,
    ctx: "RenderContext",
) -> List[Candidate]:
    """Load the records that can be selected.

    The order of the result is the order in which the data access layer
    returns the records; the transform is in charge of ordering, filtering
    and limiting the candidates. Errors raised by the transform are not
    caught.

    Args:
        repo: The data access layer.
        target: The collection the relation points into.
        query_transform: Narrows the base query; None leaves it unchanged.
        display_attribute: The attribute used as label.
        ctx: The render context handed to the transform.

    Returns:
        The candidates.
    """
    query = base_query(target)
    if query_transform is not None:
        query = query_transform(query, ctx)

    records = repo.query_all(target, query)
    result = [
        Candidate(
            label=record_attr(record, display_attribute),
            id=record_attr(record, "id"),
            record=record,
        )
        for record in records
    ]
    logger.log(
        10,
        "Loaded %d candidates from %s",
        len(result),
        getattr(target, "__name__", target),
    )
    return result


def find_candidate(
    candidates: List[Candidate], value: Any
) -> Optional[Candidate]:
    """Locate the candidate selected by a submitted value."""
    for candidate in candidates:
        if candidate.matches(value):
            return candidate
    return None
