import logging
from typing import TYPE_CHECKING, Any, Optional

from attrs import define, field
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import RelationshipDirection

from exdrf_rel.errors import SchemaError

if TYPE_CHECKING:
    from exdrf_rel.typedefs import SchemaIntrospector

logger = logging.getLogger(__name__)


@define(frozen=True)
class AssociationMetadata:
    """What a field needs to know about the relation it edits.

    Attributes:
        target: The collection the relation points into (for SQLAlchemy
            this is the mapped class of the related records).
        owner_key: The attribute of the owning record that holds the
            foreign key.
        relation: The name of the relation in the owning schema.
    """

    target: Any
    owner_key: str
    relation: str = field(default="")

    @property
    def target_name(self) -> str:
        """The name of the target collection."""
        return getattr(self.target, "__name__", str(self.target))


class SqlAlchemyIntrospector:
    """Describes the many-to-one relations of SQLAlchemy mapped classes."""

    def describe_association(
        self, schema: Any, name: str
    ) -> AssociationMetadata:
        mapper = sa_inspect(schema, raiseerr=False)
        if mapper is None or not hasattr(mapper, "relationships"):
            raise SchemaError(f"{schema!r} is not a mapped class")

        schema_name = mapper.class_.__name__
        relation = mapper.relationships.get(name)
        if relation is None:
            raise SchemaError(
                f"No relation named `{name}` in schema `{schema_name}`"
            )

        if (
            relation.direction is not RelationshipDirection.MANYTOONE
            or relation.uselist
        ):
            raise SchemaError(
                f"Relation `{schema_name}.{name}` is not a to-one relation "
                f"that owns its foreign key ({relation.direction.name})"
            )

        columns = list(relation.local_columns)
        if len(columns) != 1:
            raise SchemaError(
                f"Relation `{schema_name}.{name}` uses {len(columns)} "
                "local columns; exactly one foreign key is supported"
            )

        # The attribute key may differ from the name of the column.
        owner_key = mapper.get_property_by_column(columns[0]).key
        return AssociationMetadata(
            target=relation.mapper.class_,
            owner_key=owner_key,
            relation=name,
        )


def resolve(
    schema: Any,
    name: str,
    introspector: Optional["SchemaIntrospector"] = None,
) -> AssociationMetadata:
    """Resolve the target collection and foreign key of a relation.

    Args:
        schema: The schema that owns the relation.
        name: The attribute name of the relation (not its label).
        introspector: Describes the schema; by default SQLAlchemy mapped
            classes are expected.

    Raises:
        SchemaError: The relation cannot be used by a belongs-to field.
    """
    if introspector is None:
        introspector = SqlAlchemyIntrospector()
    result = introspector.describe_association(schema, name)
    logger.log(
        10,
        "Relation %s resolved to %s through %s",
        name,
        result.target_name,
        result.owner_key,
    )
    return result
