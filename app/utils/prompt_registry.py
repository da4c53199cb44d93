"""Load a jinja2 template from the prompt registry."""
import os

from jinja2 import Environment, FileSystemLoader

from app.utils.logger import get_logger

logger = get_logger(__name__)

PROMPTS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "prompts"))


class PromptRegistry:
    """A registry for managing prompt templates."""

    def __init__(self, registry_path=PROMPTS_DIR):
        self.registry_path = registry_path
        self.env = Environment(loader=FileSystemLoader(self.registry_path), keep_trailing_newline=False)

    def load_prompt_template(self, template_name: str, template_version: int):
        """Load a prompt template from the registry."""
        try:
            template = self.env.get_template(f"{template_name}_v{template_version}.jinja2")
            logger.debug("Loaded template: %s, version: %s", template_name, template_version)
            return template
        except Exception as e:
            logger.error("Error loading template %s: %s", template_name, repr(e), exc_info=True)
            raise

    def render(self, template_name: str, template_version: int = 1, **context) -> str:
        return self.load_prompt_template(template_name, template_version).render(**context).strip()
