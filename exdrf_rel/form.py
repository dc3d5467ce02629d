import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping

from attrs import define, field
from markupsafe import Markup

from exdrf_rel.rendering import render_template

if TYPE_CHECKING:
    from exdrf_rel.context import RenderContext
    from exdrf_rel.field import BelongsToField

logger = logging.getLogger(__name__)


@define
class FormState:
    """The state of the create or edit form that contains the field.

    Attributes:
        data: The current values of the form, keyed by attribute name.
        errors: Validation messages, keyed by attribute name.
        name: The name of the form; inputs are named `name[attribute]`.
    """

    data: Mapping[str, Any] = field(factory=dict)
    errors: Mapping[str, List[str]] = field(factory=dict)
    name: str = field(default="change")

    def input_name(self, key: str) -> str:
        return f"{self.name}[{key}]"

    def input_id(self, key: str) -> str:
        return f"{self.name}_{key}"


def form_context(
    fld: "BelongsToField", form: FormState, ctx: "RenderContext"
) -> Dict[str, Any]:
    """Compute the variables of the form template."""
    spec = fld.spec
    owner_key = fld.metadata.owner_key
    return {
        "label": spec.text_label,
        "align_label": spec.align_label,
        "input_name": form.input_name(owner_key),
        "input_id": form.input_id(owner_key),
        "options": fld.load_options(ctx, for_form=True),
        "current": form.data.get(owner_key),
        "prompt": spec.resolve_prompt(ctx),
        "errors": list(form.errors.get(owner_key, [])),
        "readonly": spec.is_readonly(ctx),
    }


def render_form(
    fld: "BelongsToField", form: FormState, ctx: "RenderContext"
) -> Markup:
    """Render the select of the field inside a create or edit form.

    Options are labeled with the form display attribute. No option is
    selected unless the form already holds the identifier of a candidate.
    """
    logger.log(10, "Rendering form input for %s", fld.spec.name)
    return render_template("form.html.j2", **form_context(fld, form, ctx))
