from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Mapping,
    Protocol,
    Sequence,
)

if TYPE_CHECKING:
    from sqlalchemy import Select

    from exdrf_rel.association import AssociationMetadata
    from exdrf_rel.context import RenderContext
    from exdrf_rel.repo import PatchResult


# Narrows the base query of the candidates. Must not have side effects.
QueryTransform = Callable[["Select", "RenderContext"], "Select"]

# Computes the prompt for one render.
PromptFn = Callable[["RenderContext"], str]

# Decides if the field is read-only for one render.
ReadonlyFn = Callable[["RenderContext"], bool]

# Converts a value into the text shown to the user.
PrettyFn = Callable[[Any], str]


class SchemaIntrospector(Protocol):
    """Protocol for objects that can describe the associations of a schema."""

    def describe_association(
        self, schema: Any, name: str
    ) -> "AssociationMetadata":
        """Describe the to-one association called `name` in `schema`.

        Args:
            schema: The schema that owns the relation (for SQLAlchemy this
                is the mapped class).
            name: The attribute name of the relation.

        Raises:
            SchemaError: The relation does not exist or is not a to-one
                owning-side relation.
        """
        ...


class HasQueryAll(Protocol):
    """Protocol for the data access layer used to load candidates."""

    def query_all(self, target: Any, query: "Select") -> Sequence[Any]:
        """Execute the query and return all records in database order."""
        ...


class Authorizer(Protocol):
    """Protocol for the authorization collaborator."""

    def can_perform(
        self,
        ctx: "RenderContext",
        action: str,
        record: Any,
        resource: Any,
    ) -> bool:
        """Tell if the current actor may perform `action` on `record`."""
        ...


class PathBuilder(Protocol):
    """Protocol for the path generation collaborator."""

    def build_path(
        self,
        connection: Any,
        resource: Any,
        params: Mapping[str, Any],
        action: str,
        record: Any,
    ) -> str:
        """Compute the url of `record` inside `resource` for `action`."""
        ...


class InlineUpdater(Protocol):
    """Protocol for the generic inline field update."""

    def apply_patch(
        self, ctx: "RenderContext", changes: Dict[str, Any]
    ) -> "PatchResult":
        """Persist `changes` into the item of the context.

        Validation problems are reported in the result, not raised.
        """
        ...

