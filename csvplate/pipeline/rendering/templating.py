"""Jinja2 environment, helper library and template execution.

This module is the only place that talks to Jinja2. It builds the
environment shared by the content template and the output-path template,
registers csvplate's helper functions next to Jinja2's built-in filters,
compiles template text and streams rendered output into a writable sink.

Boundaries
----------
- Compilation errors become ``TemplateCompileError`` naming the template.
- Execution errors become ``TemplateRenderError``; a failure while writing
  rendered chunks becomes ``DestinationUnavailableError``.
- No file system access: callers hand in text and open streams.

Examples
--------
>>> env = build_environment()
>>> tpl = compile_template(env, "Hello {{ name | snakecase }}!", "content")
>>> render_to_string(tpl, {"name": "Ada Lovelace"})
'Hello ada_lovelace!'
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, Mapping, TextIO

from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError, Undefined

from csvplate.exceptions import DestinationUnavailableError, TemplateCompileError, TemplateRenderError

_WORD_BOUNDARY = re.compile(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])")
_WHITESPACE = re.compile(r"\s+")


def _words(value: Any) -> list[str]:
    return _WORD_BOUNDARY.findall(str(value))


def snakecase(value: Any) -> str:
    """``"First Name"`` -> ``"first_name"``."""
    return "_".join(word.lower() for word in _words(value))


def kebabcase(value: Any) -> str:
    """``"First Name"`` -> ``"first-name"``."""
    return "-".join(word.lower() for word in _words(value))


def pascalcase(value: Any) -> str:
    """``"first name"`` -> ``"FirstName"``."""
    return "".join(word.capitalize() for word in _words(value))


def camelcase(value: Any) -> str:
    """``"first name"`` -> ``"firstName"``."""
    pascal = pascalcase(value)
    return pascal[:1].lower() + pascal[1:]


def squash(value: Any) -> str:
    """Collapse runs of whitespace into single spaces and trim the ends."""
    return _WHITESPACE.sub(" ", str(value)).strip()


def dateformat(value: Any, in_format: str, out_format: str) -> str:
    """Reformat a date string, e.g. ``dateformat("31/12/2024", "%d/%m/%Y", "%Y-%m-%d")``.

    Raises ``ValueError`` when ``value`` does not match ``in_format``; the
    renderer reports it as a template execution error.
    """
    return datetime.strptime(str(value), in_format).strftime(out_format)


def now(fmt: str | None = None) -> Any:
    """Return the current local time, formatted when ``fmt`` is given."""
    current = datetime.now()
    return current.strftime(fmt) if fmt else current


FUNCTION_LIBRARY: dict[str, Callable[..., Any]] = {
    "snakecase": snakecase,
    "kebabcase": kebabcase,
    "camelcase": camelcase,
    "pascalcase": pascalcase,
    "squash": squash,
    "dateformat": dateformat,
}

GLOBAL_FUNCTIONS: dict[str, Callable[..., Any]] = {
    **FUNCTION_LIBRARY,
    "now": now,
}


def build_environment(strict: bool = False) -> Environment:
    """Create the Jinja2 environment used for all csvplate templates.

    Parameters
    ----------
    strict : bool, optional
        When True, referencing an undefined variable fails the render
        instead of producing an empty string.

    Returns
    -------
    Environment
        Environment without autoescaping that keeps a template's trailing
        newline, with the helper library registered both as filters and as
        global functions.
    """
    env = Environment(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined if strict else Undefined,
    )
    env.filters.update(FUNCTION_LIBRARY)
    env.globals.update(GLOBAL_FUNCTIONS)
    return env


def compile_template(env: Environment, source: str, name: str) -> Template:
    """Compile template text.

    Parameters
    ----------
    env : Environment
        Environment from :func:`build_environment`.
    source : str
        Template text.
    name : str
        Label used in error messages (``"content"`` or ``"output"``).

    Raises
    ------
    TemplateCompileError
        If the text is not a valid template.
    """
    try:
        template = env.from_string(source)
    except TemplateSyntaxError as error:
        raise TemplateCompileError(
            f"parse {name} template: line {error.lineno}: {error.message}",
            context={"template": name, "line": error.lineno},
        ) from error
    template.name = name
    return template


def render_to_stream(template: Template, context: Mapping[str, Any], stream: TextIO) -> None:
    """Execute ``template`` against ``context``, writing chunks as they render.

    Raises
    ------
    DestinationUnavailableError
        If writing to ``stream`` fails.
    TemplateRenderError
        If the template raises while rendering.
    """
    try:
        for chunk in template.generate(context):
            stream.write(chunk)
    except OSError as error:
        raise DestinationUnavailableError(f"write output: {error}") from error
    except Exception as error:
        raise TemplateRenderError(
            f"execute template: {error}", context={"template": template.name}
        ) from error


def render_to_string(template: Template, context: Mapping[str, Any]) -> str:
    """Execute ``template`` and return its output as a string.

    Raises
    ------
    TemplateRenderError
        If the template raises while rendering.
    """
    try:
        return template.render(context)
    except Exception as error:
        raise TemplateRenderError(
            f"execute template: {error}", context={"template": template.name}
        ) from error
