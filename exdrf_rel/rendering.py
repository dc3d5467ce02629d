import logging
import os
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")

_env = None


def jinja_env() -> Environment:
    """The environment used to render the fields.

    It is created on first use.
    """
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(
                enabled_extensions=("html", "j2"),
                default_for_string=True,
            ),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _env.filters["selected"] = is_selected
    return _env


def is_selected(candidate_id: Any, current: Any) -> bool:
    """Tell if an option is the current value of the select."""
    if current is None or candidate_id is None:
        return False
    return str(candidate_id) == str(current)


def render_template(name: str, **kwargs: Any) -> Markup:
    """Render one of the templates of the package."""
    logger.log(1, "Rendering %s", name)
    return Markup(jinja_env().get_template(name).render(**kwargs).strip())
