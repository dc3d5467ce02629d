from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

from attrs import define, field
from pydantic import BaseModel, ConfigDict, ValidationError

from exdrf_rel.constants import LabelAlign
from exdrf_rel.errors import ConfigurationError

if TYPE_CHECKING:
    from exdrf_rel.context import RenderContext
    from exdrf_rel.typedefs import PromptFn, QueryTransform, ReadonlyFn


@define(frozen=True)
class FieldSpec:
    """Static configuration of a belongs-to field.

    Instances are created when the resource is declared and live as long as
    the resource definition does.

    Attributes:
        name: The attribute name of the relation in the owning schema.
        display_field: The attribute of the related record used for
            displaying values.
        display_field_form: The attribute of the related record used as
            label of the options in forms. Defaults to `display_field`.
        live_resource: The resource of the related records. When set, values
            are rendered as links to the detail page of the related record.
        options_query: A function that receives the base query and the
            render context and returns the query of the candidates.
        prompt: The text of the blank option or a function that receives
            the render context and returns it. Without a prompt there is no
            blank option.
        label: The label of the field. Defaults to the name in text case.
        readonly: Whether the inline editor is disabled; either a flag or a
            function of the render context.
        align_label: Vertical alignment of the label in forms.
    """

    name: str
    display_field: str
    display_field_form: Optional[str] = field(default=None)
    live_resource: Any = field(default=None)
    options_query: Optional["QueryTransform"] = field(default=None)
    prompt: Union[str, "PromptFn", None] = field(default=None)
    label: Optional[str] = field(default=None)
    readonly: Union[bool, "ReadonlyFn"] = field(default=False)
    align_label: LabelAlign = field(default="center")

    @classmethod
    def from_options(
        cls, name: str, options: Mapping[str, Any]
    ) -> "FieldSpec":
        """Create the specification from a mapping of options.

        Args:
            name: The attribute name of the relation.
            options: The options of the field, as declared by the resource.

        Raises:
            ConfigurationError: The options are not valid.
        """
        try:
            parsed = BelongsToInfo.model_validate(dict(options), strict=True)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid options for belongs-to field `{name}`: {e}"
            ) from e

        # Only keep the options that were provided; callables and resources
        # are passed through as they are.
        values = {}
        for key in BelongsToInfo.model_fields:
            value = getattr(parsed, key)
            if value is not None:
                values[key] = value
        return cls(name=name, **values)

    @property
    def form_display_field(self) -> str:
        """The attribute used for labels of the options in forms."""
        return self.display_field_form or self.display_field

    @property
    def text_label(self) -> str:
        """The label of the field."""
        if self.label:
            return self.label
        parts = self.name.split("_")
        parts[0] = parts[0].title()
        return " ".join(parts)

    @property
    def has_link(self) -> bool:
        """Tell if the field was configured to link to related records."""
        return self.live_resource is not None

    def resolve_prompt(self, ctx: "RenderContext") -> Optional[str]:
        """Compute the prompt for this render."""
        if self.prompt is None:
            return None
        if callable(self.prompt):
            return self.prompt(ctx)
        return self.prompt

    def is_readonly(self, ctx: "RenderContext") -> bool:
        """Tell if the field is read-only for this render."""
        if callable(self.readonly):
            return bool(self.readonly(ctx))
        return bool(self.readonly)


class BelongsToInfo(BaseModel):
    """Parser for the options of a belongs-to field.

    The attributes have exactly the same names as those in the `FieldSpec`
    class, so that they can be used to create a `FieldSpec` object.

    Attributes:
        display_field: The attribute of the related record used for
            displaying values. Required.
        display_field_form: The attribute used as label in forms.
        live_resource: The resource of the related records.
        options_query: `fn(query, ctx) -> query` narrowing the candidates.
        prompt: A string or `fn(ctx) -> str`.
        label: The label of the field.
        readonly: A flag or `fn(ctx) -> bool`.
        align_label: One of `top`, `center` or `bottom`.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    display_field: str
    display_field_form: Optional[str] = None
    live_resource: Any = None
    options_query: Optional[Callable[..., Any]] = None
    prompt: Optional[Union[str, Callable[..., Any]]] = None
    label: Optional[str] = None
    readonly: Optional[Union[bool, Callable[..., Any]]] = None
    align_label: Optional[LabelAlign] = None
