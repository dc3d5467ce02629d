# Constants for the belongs-to field
from typing import Literal

FIELD_TYPE_BELONGS_TO = "belongs-to"

# Actions passed to the authorization and path generation collaborators.
ACTION_SHOW = "show"

# The modes in which a live resource renders its fields.
LIVE_ACTION_INDEX = "index"
LIVE_ACTION_SHOW = "show"
LIVE_ACTION_NEW = "new"
LIVE_ACTION_EDIT = "edit"
LIVE_ACTION_RESOURCE_ACTION = "resource_action"

# Values rendered in these modes live inside table cells and get truncated.
TRUNCATED_LIVE_ACTIONS = (LIVE_ACTION_INDEX, LIVE_ACTION_RESOURCE_ACTION)

# Shown instead of a blank string when there is nothing to show.
EMPTY_VALUE = "—"

# Name of the form and of the event used by the inline editor.
INLINE_FORM_NAME = "index_form"
INLINE_EVENT = "update-field"

LabelAlign = Literal["top", "center", "bottom"]
