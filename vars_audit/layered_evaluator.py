"""Evaluator resolving variables from layered YAML files with Jinja2.

Layers are merged in the order given, a later layer replacing the top-level
keys of an earlier one (host over group over all). String values are rendered
as Jinja2 templates; referenced variables are resolved first, recursively, so
a variable referring to itself or to a missing variable is reported as not
defined instead of raising.
"""

import json
import logging
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, StrictUndefined, TemplateError, meta

from vars_audit.definition_resolver import UNRESOLVED_MARKER
from vars_audit.errors import ConfigError

logger = logging.getLogger(__name__)

TEMPLATE_MARKERS = ("{{", "{%", "{#")


class UnresolvedError(Exception):
    """A variable, or one it depends on, cannot be resolved."""


def load_layers(layer_sources: Iterable[str | Path]) -> dict[str, Any]:
    """Load and merge layer files; missing files are skipped."""
    merged: dict[str, Any] = {}
    for source in layer_sources:
        path = Path(source)
        if not path.is_file():
            logger.debug("Layer %s not found, skipping", source)
            continue
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Layer %s unreadable, skipping: %s", source, exc)
            continue
        except yaml.YAMLError as exc:
            msg = f"Layer {source} is not valid YAML: {exc}"
            raise ConfigError(msg) from exc
        if data is None:
            continue
        if not isinstance(data, dict):
            msg = f"Layer {source} must be a mapping of variables"
            raise ConfigError(msg)
        merged.update(data)
    return merged


class LayeredEvaluator:
    """Resolves a variable name to its final textual value."""

    def __init__(
        self,
        layer_sources: Iterable[str | Path],
        facts: Mapping[str, Any] | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        """Load the layers; facts sit below every layer in precedence."""
        self.variables: dict[str, Any] = dict(facts or {})
        self.variables.update(load_layers(layer_sources))
        self.verbose = verbose
        self.env = Environment(undefined=StrictUndefined, autoescape=False)  # noqa: S701
        # Shared by resolver threads; two threads may render the same name once each.
        self._resolved: dict[str, Any] = {}
        self._lock = threading.Lock()

    def __call__(self, name: str) -> str:
        """Return the rendered value, or the unresolved marker."""
        try:
            value = self.value_of(name)
        except UnresolvedError as exc:
            if self.verbose:
                return f"{UNRESOLVED_MARKER}: {exc}"
            return UNRESOLVED_MARKER
        if isinstance(value, str):
            return value
        return json.dumps(value, sort_keys=True, default=str)

    def value_of(self, name: str, stack: tuple[str, ...] = ()) -> Any:
        """Return the fully rendered value of a variable."""
        with self._lock:
            if name in self._resolved:
                return self._resolved[name]
        if name in stack:
            chain = " -> ".join((*stack, name))
            msg = f"recursive loop detected in template: {chain}"
            raise UnresolvedError(msg)
        if name not in self.variables:
            msg = f"'{name}' is undefined"
            raise UnresolvedError(msg)
        value = self._render(self.variables[name], (*stack, name))
        with self._lock:
            self._resolved[name] = value
        return value

    def _render(self, value: Any, stack: tuple[str, ...]) -> Any:
        if isinstance(value, str):
            return self._render_text(value, stack)
        if isinstance(value, list):
            return [self._render(v, stack) for v in value]
        if isinstance(value, dict):
            return {k: self._render(v, stack) for k, v in value.items()}
        return value

    def _render_text(self, text: str, stack: tuple[str, ...]) -> str:
        if not any(m in text for m in TEMPLATE_MARKERS):
            return text
        try:
            ast = self.env.parse(text)
            # Only known names are pre-resolved; unknown ones are left to
            # StrictUndefined so that filters like default() still apply.
            context = {
                ref: self.value_of(ref, stack)
                for ref in meta.find_undeclared_variables(ast)
                if ref in self.variables
            }
            return self.env.from_string(text).render(context)
        except TemplateError as exc:
            raise UnresolvedError(exc.message or str(exc)) from exc
        except (ArithmeticError, TypeError, ValueError) as exc:
            raise UnresolvedError(str(exc)) from exc
