from exdrf_rel.association import (  # noqa: F401
    AssociationMetadata,
    SqlAlchemyIntrospector,
    resolve,
)
from exdrf_rel.context import FieldHost, RenderContext  # noqa: F401
from exdrf_rel.errors import ConfigurationError, SchemaError  # noqa: F401
from exdrf_rel.field import BelongsToField  # noqa: F401
from exdrf_rel.field_spec import BelongsToInfo, FieldSpec  # noqa: F401
from exdrf_rel.form import FormState  # noqa: F401
from exdrf_rel.inline import EditState, InlineEditor  # noqa: F401
from exdrf_rel.options import (  # noqa: F401
    Candidate,
    base_query,
    load_options,
)
from exdrf_rel.presenter import (  # noqa: F401
    DisplayDecision,
    Empty,
    Link,
    PlainText,
    present,
    pretty_value,
)
from exdrf_rel.repo import PatchResult, SqlRepo  # noqa: F401
from exdrf_rel.resource import RelResource  # noqa: F401
