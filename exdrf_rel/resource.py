import logging
import re
from typing import Any, Iterator, List, Mapping, Union

from attrs import define, evolve, field

from exdrf_rel.context import FieldHost
from exdrf_rel.field import BelongsToField
from exdrf_rel.field_spec import FieldSpec

logger = logging.getLogger(__name__)


@define
class RelResource:
    """A resource whose relation fields are rendered by this package.

    You can retrieve a field using the `resource[key]` syntax, where key is
    either the name of the field or its index.

    Attributes:
        name: The name of the resource, in PascalCase.
        schema: The mapped class of the records of the resource.
        host: The collaborators shared by all the fields.
        fields: The relation fields, in declaration order.
    """

    name: str
    schema: Any = field(repr=False)
    host: FieldHost = field(repr=False)
    fields: List[BelongsToField] = field(factory=list)

    def __repr__(self) -> str:
        return f"<RelResource {self.name} ({len(self.fields)} fields)>"

    def __contains__(self, key: Union[int, str]) -> bool:
        if isinstance(key, int):
            return 0 <= key < len(self.fields)
        return any(f.name == key for f in self.fields)

    def __iter__(self) -> Iterator[BelongsToField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, key: Union[int, str]) -> BelongsToField:
        if isinstance(key, int):
            return self.fields[key]

        for fld in self.fields:
            if fld.name == key:
                return fld

        raise KeyError(f"No field found for key `{key}` in `{self.name}`")

    @property
    def text_name(self) -> str:
        """Return the name of the resource in `Text case`."""
        tmp = re.sub(r"(?<!^)(?=[A-Z])", " ", self.name).lower()
        return tmp[0].upper() + tmp[1:]

    def add_field(
        self, name: str, options: Union[FieldSpec, Mapping[str, Any]]
    ) -> BelongsToField:
        """Declare a relation field.

        The options are validated and the relation is resolved right away,
        so configuration errors surface when the resource is declared.

        Args:
            name: The attribute name of the relation.
            options: Either a ready specification or a mapping of options.

        Raises:
            ConfigurationError: The options are invalid or the schema has no
                usable relation with that name.
        """
        if name in self:
            raise KeyError(f"Field `{name}` already declared in `{self.name}`")

        if isinstance(options, FieldSpec):
            spec = options
            if spec.name != name:
                spec = evolve(spec, name=name)
        else:
            spec = FieldSpec.from_options(name, options)

        fld = BelongsToField(spec=spec, schema=self.schema, host=self.host)
        self.fields.append(fld)
        logger.debug("Declared %r in %s", fld, self.name)
        return fld
