import logging
from typing import TYPE_CHECKING, Any, List, Mapping

from attrs import define, field
from markupsafe import Markup

from exdrf_rel.association import AssociationMetadata, resolve
from exdrf_rel.constants import FIELD_TYPE_BELONGS_TO
from exdrf_rel.errors import ConfigurationError
from exdrf_rel.form import FormState, render_form
from exdrf_rel.inline import EditState, InlineEditor
from exdrf_rel.options import Candidate, load_options
from exdrf_rel.presenter import DisplayDecision, Empty, Link, present
from exdrf_rel.rendering import render_template

if TYPE_CHECKING:
    from exdrf_rel.context import FieldHost, RenderContext
    from exdrf_rel.field_spec import FieldSpec

logger = logging.getLogger(__name__)


@define
class BelongsToField:
    """A field that edits a many-to-one relation.

    The field shows the related record (optionally as a link to its detail
    page), offers the related records as options of a select in forms and
    lets the user change the relation from list views.

    The association is resolved when the field is created, so that a
    misconfigured field fails when the resource is declared rather than on
    some later render.

    Attributes:
        spec: The static configuration of the field.
        schema: The schema that owns the relation.
        host: The collaborators provided by the host framework.
        metadata: The target collection and foreign key of the relation.
    """

    spec: "FieldSpec"
    schema: Any = field(repr=False)
    host: "FieldHost" = field(repr=False)
    metadata: AssociationMetadata = field(init=False, repr=False)

    type_name: str = field(default=FIELD_TYPE_BELONGS_TO, init=False)

    def __attrs_post_init__(self):
        if not self.spec.display_field:
            raise ConfigurationError(
                f"Belongs-to field `{self.spec.name}` needs a display_field"
            )
        self.metadata = resolve(
            self.schema, self.spec.name, self.host.introspector
        )

    def __repr__(self) -> str:
        return f"BelongsTo({self.spec.name} -> {self.metadata.target_name})"

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def display_field(self) -> str:
        """The attribute of the related record used for displaying it."""
        return self.spec.display_field

    @property
    def display_field_form(self) -> str:
        """The attribute of the related record used as label in forms."""
        return self.spec.form_display_field

    def resolve_metadata(self) -> AssociationMetadata:
        return self.metadata

    def target_schema(self) -> Any:
        """The schema of the related records."""
        return self.metadata.target

    def is_association(self) -> bool:
        return True

    def load_options(
        self, ctx: "RenderContext", for_form: bool = True
    ) -> List[Candidate]:
        """Load the candidates of the field for this render.

        Args:
            ctx: The render context, passed to the options query.
            for_form: Label the candidates with the form display attribute
                instead of the regular one.
        """
        return load_options(
            self.host.repo,
            self.metadata.target,
            self.spec.options_query,
            self.display_field_form if for_form else self.display_field,
            ctx,
        )

    def present(self, value: Any, ctx: "RenderContext") -> DisplayDecision:
        """Decide how the related record is shown."""
        return present(value, self.spec, ctx, self.host)

    def render_value(self, value: Any, ctx: "RenderContext") -> Markup:
        """Render the related record in list and detail pages."""
        decision = self.present(value, ctx)
        if isinstance(decision, Empty):
            kind = "empty"
        elif isinstance(decision, Link):
            kind = "link"
        else:
            kind = "text"
        return render_template(
            "value.html.j2",
            decision=decision,
            decision_kind=kind,
            empty_text=self.host.pretty(None),
            truncate=ctx.truncate,
        )

    def render_form(self, form: FormState, ctx: "RenderContext") -> Markup:
        """Render the select inside a create or edit form."""
        return render_form(self, form, ctx)

    def inline_editor(self, value: Any = None) -> InlineEditor:
        """Create the state of an inline edit for a record of a list."""
        return InlineEditor(fld=self, value=value)

    def render_inline_form(
        self, editor: InlineEditor, ctx: "RenderContext"
    ) -> Markup:
        """Render the compact select used in list views."""
        return editor.render(ctx)

    def handle_inline_edit_event(
        self,
        editor: InlineEditor,
        params: Mapping[str, Any],
        ctx: "RenderContext",
    ) -> EditState:
        """Apply the selection made by the user in an inline editor."""
        return editor.handle_event(params, ctx)
