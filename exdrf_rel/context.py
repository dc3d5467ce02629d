from typing import TYPE_CHECKING, Any, Dict, Optional

from attrs import define, field

from exdrf_rel.constants import LIVE_ACTION_INDEX, TRUNCATED_LIVE_ACTIONS

if TYPE_CHECKING:
    from exdrf_rel.typedefs import (  # noqa: F401
        Authorizer,
        HasQueryAll,
        InlineUpdater,
        PathBuilder,
        PrettyFn,
        SchemaIntrospector,
    )


@define(frozen=True)
class RenderContext:
    """The state of one request that a field needs while rendering.

    The context is created by the host for every render and passed
    explicitly to every operation that needs it.

    Attributes:
        connection: The socket or connection handle of the request. It is
            only handed over to the path builder.
        actor: The user performing the request.
        params: The path parameters of the current page.
        live_action: The mode of the current page (`index`, `show`, `new`,
            `edit` or `resource_action`).
        item: The record that owns the field. The inline updater persists
            changes into this record.
        assigns: Free-form state that query transforms and prompt
            functions may inspect (filters, parent records, counts).
    """

    connection: Any = field(default=None, repr=False)
    actor: Any = field(default=None)
    params: Dict[str, Any] = field(factory=dict)
    live_action: str = field(default=LIVE_ACTION_INDEX)
    item: Any = field(default=None, repr=False)
    assigns: Dict[str, Any] = field(factory=dict, repr=False)

    @property
    def truncate(self) -> bool:
        """Tell if values are rendered inside narrow table cells."""
        return self.live_action in TRUNCATED_LIVE_ACTIONS

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value from the assigns."""
        return self.assigns.get(key, default)


def _default_introspector():
    from exdrf_rel.association import SqlAlchemyIntrospector

    return SqlAlchemyIntrospector()


def _default_pretty():
    from exdrf_rel.presenter import pretty_value

    return pretty_value


@define
class FieldHost:
    """The collaborators that the host framework lends to a field.

    Attributes:
        repo: The data access layer used to load candidates.
        authorizer: Decides if the current actor may see a related record.
        router: Builds links to related records.
        updater: Persists inline edits.
        introspector: Describes the associations of a schema. Defaults to
            the SQLAlchemy introspector.
        pretty: Converts display values to text; blank values become a
            placeholder glyph.
    """

    repo: "HasQueryAll"
    authorizer: Optional["Authorizer"] = field(default=None)
    router: Optional["PathBuilder"] = field(default=None)
    updater: Optional["InlineUpdater"] = field(default=None)
    introspector: "SchemaIntrospector" = field(factory=_default_introspector)
    pretty: "PrettyFn" = field(factory=_default_pretty)
