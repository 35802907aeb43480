"""Jinja2 rendering for the system prompt and workspace markdown.

Templates live next to this module in templates/:
- system_prompt.md.j2: base instructions listing the registered tools
- conversation.md.j2: markdown export of a saved conversation
- identity.md.j2: IDENTITY.md written by `goclaw init`
"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def get_template_env() -> Environment:
    # Block tags must not leave blank lines in the rendered markdown
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_template(template_name: str, **context) -> str:
    """Render `template_name` with the given variables.

    Raises:
        jinja2.TemplateNotFound: If the template does not exist
        jinja2.UndefinedError: If a variable the template uses is missing
    """
    return get_template_env().get_template(template_name).render(**context)
