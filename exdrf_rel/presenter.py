import logging
from typing import TYPE_CHECKING, Any, Union

from attrs import define

from exdrf_rel.constants import ACTION_SHOW, EMPTY_VALUE
from exdrf_rel.errors import ConfigurationError
from exdrf_rel.options import record_attr

if TYPE_CHECKING:
    from exdrf_rel.context import FieldHost, RenderContext
    from exdrf_rel.field_spec import FieldSpec

logger = logging.getLogger(__name__)


@define(frozen=True)
class Empty:
    """There is no related record."""


@define(frozen=True)
class PlainText:
    """Show the related record as text."""

    text: str


@define(frozen=True)
class Link:
    """Show the related record as a link to its detail page."""

    text: str
    url: str


DisplayDecision = Union[Empty, PlainText, Link]


def pretty_value(value: Any) -> str:
    """Convert a value to text, replacing blank values with a glyph."""
    if value is None:
        return EMPTY_VALUE
    text = str(value)
    if not text.strip():
        return EMPTY_VALUE
    return text


def present(
    value: Any,
    spec: "FieldSpec",
    ctx: "RenderContext",
    host: "FieldHost",
) -> DisplayDecision:
    """Decide how the related record is shown.

    A link is produced only when the field names the resource of the
    related records and the current actor may see the record.

    Args:
        value: The related record or None.
        spec: The configuration of the field.
        ctx: The render context.
        host: Provides the authorization and path collaborators.
    """
    if value is None:
        return Empty()

    text = host.pretty(record_attr(value, spec.display_field))

    if spec.has_link and host.authorizer is not None:
        allowed = host.authorizer.can_perform(
            ctx, ACTION_SHOW, value, spec.live_resource
        )
        if allowed:
            if host.router is None:
                raise ConfigurationError(
                    f"Field `{spec.name}` links to related records but "
                    "there is no path builder"
                )
            url = host.router.build_path(
                ctx.connection,
                spec.live_resource,
                ctx.params,
                ACTION_SHOW,
                value,
            )
            return Link(text=text, url=url)
        logger.log(10, "Link to %s denied for %s", value, ctx.actor)

    return PlainText(text=text)
