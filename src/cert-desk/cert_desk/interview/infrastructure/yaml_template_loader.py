"""Loads an interview Template from a YAML or JSON file."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from cert_desk.interview.domain.template import Template
from cert_desk.interview.infrastructure.errors import TemplateLoadError


def load_template(path: Path) -> Template:
    """
    Parse and validate a template file. Keys may be camelCase or snake_case.

    Raises:
        TemplateLoadError: if the file is missing, not YAML, or fails validation.
    """
    if not path.is_file():
        raise TemplateLoadError(path=path, reason="file not found")
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise TemplateLoadError(path=path, reason=f"invalid YAML ({exc})") from exc
    try:
        return Template.model_validate(raw)
    except ValidationError as exc:
        raise TemplateLoadError(path=path, reason=str(exc)) from exc
