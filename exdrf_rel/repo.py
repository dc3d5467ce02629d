import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from attrs import define, field
from sqlalchemy import Engine, Select, create_engine, inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

if TYPE_CHECKING:
    from exdrf_rel.context import RenderContext

logger = logging.getLogger(__name__)


@define
class PatchResult:
    """The outcome of an inline update.

    Attributes:
        value: The updated record when the update succeeded.
        errors: Validation messages, keyed by attribute name. The `base`
            key holds errors that are not tied to an attribute.
    """

    value: Any = field(default=None)
    errors: Dict[str, List[str]] = field(factory=dict)

    @property
    def is_valid(self) -> bool:
        """Check if the update was accepted."""
        return not self.errors

    @property
    def is_invalid(self) -> bool:
        """Check if the update was rejected."""
        return not self.is_valid


@define
class SqlRepo:
    """Data access through a SQLAlchemy engine.

    Besides loading the candidates of a field, the repository implements
    the generic inline update by writing the changes into the item of the
    render context.

    Attributes:
        c_string: The connection string to the database.
        engine: The engine used to connect to the database.
    """

    c_string: str
    engine: Optional[Engine] = None
    _maker: Optional[sessionmaker] = field(default=None, repr=False)

    def connect(self) -> Engine:
        """Connect to the database."""
        if self.engine is None:
            self.engine = create_engine(self.c_string)
        return self.engine

    def close(self):
        """Release the engine."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
        self._maker = None

    def new_session(self) -> Session:
        """Create a new session.

        Records stay readable after a commit so that they can be rendered
        once the session is gone.
        """
        if self._maker is None:
            self._maker = sessionmaker(
                bind=self.connect(),
                autoflush=True,
                expire_on_commit=False,
            )
        return self._maker()

    @contextmanager
    def session(self, auto_commit: bool = False):
        """Creates a new session which it then closes after use.

        If auto_commit is True, the session is committed after use. If the
        inner code raises an exception, the session is rolled back.
        """
        session = self.new_session()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        else:
            if session.is_active and auto_commit:
                session.commit()
        finally:
            session.close()

    def create_all_tables(self, Base):
        """Creates all tables defined in the Base metadata."""
        Base.metadata.create_all(bind=self.connect())

    def query_all(self, target: Any, query: Select) -> Sequence[Any]:
        """Execute the query and return the records in database order."""
        with self.session() as session:
            return list(session.scalars(query).all())

    def get(self, target: Any, record_id: Any) -> Any:
        """Load a single record by its identifier."""
        with self.session() as session:
            return session.get(target, record_id)

    def apply_patch(
        self, ctx: "RenderContext", changes: Dict[str, Any]
    ) -> PatchResult:
        """Write the changes into the item of the context.

        Database errors are rolled back and reported in the result.
        """
        item = ctx.item
        if item is None:
            raise ValueError("The render context carries no item to update")

        Model = type(item)
        identity = sa_inspect(item).identity
        if identity is None:
            raise ValueError(f"{item!r} has not been persisted")

        try:
            with self.session(auto_commit=True) as session:
                record = session.get(Model, identity)
                if record is None:
                    return PatchResult(
                        errors={"base": ["The record no longer exists"]}
                    )
                for key, value in changes.items():
                    setattr(record, key, value)
                session.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Inline update of %s with %s failed: %s",
                Model.__name__,
                changes,
                e,
            )
            message = str(getattr(e, "orig", None) or e)
            return PatchResult(errors={"base": [message]})

        logger.log(10, "Inline update of %s with %s", Model.__name__, changes)
        return PatchResult(value=record)
