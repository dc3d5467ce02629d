import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from attrs import define, field
from markupsafe import Markup

from exdrf_rel.constants import INLINE_EVENT, INLINE_FORM_NAME
from exdrf_rel.errors import ConfigurationError
from exdrf_rel.options import Candidate, find_candidate, record_attr
from exdrf_rel.rendering import render_template

if TYPE_CHECKING:
    from exdrf_rel.context import RenderContext
    from exdrf_rel.field import BelongsToField
    from exdrf_rel.repo import PatchResult

logger = logging.getLogger(__name__)


class EditState(Enum):
    """The states of an inline edit."""

    IDLE = "idle"
    EDITING = "editing"
    INVALID = "invalid"


@define
class InlineEditor:
    """Edits the field of one record from a list view.

    Every edit is numbered. A result is applied only if it belongs to the
    latest edit that was issued, so a slow response never overwrites the
    outcome of a newer selection.

    Attributes:
        fld: The field being edited.
        value: The related record currently shown, or None.
        valid: False after the last edit was rejected.
        state: Where the edit is in its life cycle.
        issued: The number of the latest edit, sent or rejected locally.
        applied: The number of the latest edit whose result was applied.
        errors: The messages of the last rejected edit.
    """

    fld: "BelongsToField"
    value: Any = field(default=None)
    valid: bool = field(default=True)
    state: EditState = field(default=EditState.IDLE)
    issued: int = field(default=0)
    applied: int = field(default=0)
    errors: List[str] = field(factory=list)

    @property
    def current_id(self) -> Any:
        """The identifier of the related record currently shown."""
        if self.value is None:
            return None
        return record_attr(self.value, "id")

    def render(self, ctx: "RenderContext") -> Markup:
        """Render the compact select used in list views."""
        spec = self.fld.spec
        return render_template(
            "inline_form.html.j2",
            form_name=INLINE_FORM_NAME,
            event=INLINE_EVENT,
            options=self.fld.load_options(ctx, for_form=True),
            current=self.current_id,
            prompt=spec.resolve_prompt(ctx),
            valid=self.valid,
            readonly=spec.is_readonly(ctx),
        )

    def handle_event(
        self, params: Mapping[str, Any], ctx: "RenderContext"
    ) -> EditState:
        """React to the user changing the selection.

        Args:
            params: The payload of the event, shaped like
                `{"index_form": {"value": "<id>"}}`.
            ctx: The render context; its item is the record being edited.

        Returns:
            The state after the edit.
        """
        try:
            selected = params[INLINE_FORM_NAME]["value"]
        except (KeyError, TypeError) as e:
            raise ValueError(
                f"Malformed {INLINE_EVENT} event for field "
                f"`{self.fld.spec.name}`: {params!r}"
            ) from e

        if selected in (None, ""):
            if self.fld.spec.resolve_prompt(ctx) is None:
                return self.reject("A value must be selected")
            self.submit(None, ctx)
            return self.state

        candidates = self.fld.load_options(ctx, for_form=True)
        candidate = find_candidate(candidates, selected)
        if candidate is None:
            return self.reject(f"`{selected}` is not a valid choice")

        self.submit(candidate, ctx)
        return self.state

    def submit(
        self, candidate: Optional[Candidate], ctx: "RenderContext"
    ) -> int:
        """Send the patch for a candidate (None clears the relation).

        Returns:
            The number of the edit.
        """
        if self.fld.host.updater is None:
            raise ConfigurationError(
                f"Field `{self.fld.spec.name}` has no inline updater"
            )

        seq = self.issue()
        changes = self.changes_for(candidate)
        logger.log(10, "Inline edit %d of %s: %s", seq, self.fld, changes)

        try:
            result = self.fld.host.updater.apply_patch(ctx, changes)
        except Exception:
            if self.issued == seq:
                self.applied = seq
                self.state = (
                    EditState.IDLE if self.valid else EditState.INVALID
                )
            raise
        self.apply_result(seq, result, candidate)
        return seq

    def issue(self) -> int:
        """Number a new edit and mark the editor as busy.

        Hosts that persist asynchronously call this, send the patch
        themselves and hand the outcome to `apply_result()`.
        """
        self.issued += 1
        self.state = EditState.EDITING
        return self.issued

    def changes_for(self, candidate: Optional[Candidate]) -> Dict[str, Any]:
        """The one-attribute patch that selects the candidate."""
        owner_key = self.fld.metadata.owner_key
        return {owner_key: None if candidate is None else candidate.id}

    def apply_result(
        self,
        seq: int,
        result: "PatchResult",
        candidate: Optional[Candidate],
    ) -> bool:
        """Apply the outcome of an edit.

        Args:
            seq: The number of the edit, as returned by `submit()`.
            result: What the updater returned.
            candidate: The candidate that was submitted.

        Returns:
            True if the result was applied, False if it was stale.
        """
        if seq < self.issued or seq <= self.applied:
            logger.log(
                10,
                "Discarding stale result of edit %d (latest is %d)",
                seq,
                self.issued,
            )
            return False
        self.applied = seq

        if result.is_valid:
            self.value = None if candidate is None else candidate.record
            self.valid = True
            self.errors = []
            self.state = EditState.IDLE
        else:
            self.valid = False
            self.errors = [m for lst in result.errors.values() for m in lst]
            self.state = EditState.INVALID
        return True

    def reject(self, message: str) -> EditState:
        """Flag the editor as invalid without contacting the updater."""
        logger.log(10, "Inline edit of %s rejected: %s", self.fld, message)
        # Results of edits issued before the rejection are now stale.
        self.issued += 1
        self.applied = self.issued
        self.valid = False
        self.errors = [message]
        self.state = EditState.INVALID
        return self.state
