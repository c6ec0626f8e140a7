"""Template based URL generation for the application under test."""

from __future__ import annotations

from string import Formatter
from urllib.parse import quote

DEFAULT_APP_URL_TEMPLATE = "https://{domain}/play/{app_logical_name}"


class UrlMappingError(Exception):
    """Raised when a test URL cannot be generated."""


class TemplateUrlMapper:  # pylint: disable=too-few-public-methods
    """Builds the application URL from a format template.

    The template may reference `{domain}`, `{app_logical_name}` and `{persona}`;
    every placeholder it references needs a non-empty value.
    Query parameters are appended verbatim after a `?` or `&`.
    """

    def __init__(self, template: str = DEFAULT_APP_URL_TEMPLATE) -> None:
        self._template = template

    def generate_test_url(
        self,
        app_logical_name: str,
        persona: str,
        domain: str = "",
        query_params: str = "",
    ) -> str:
        if not app_logical_name:
            raise UrlMappingError("App logical name is required to generate the test URL.")
        values = {
            "domain": domain,
            "app_logical_name": quote(app_logical_name, safe=""),
            "persona": quote(persona, safe=""),
        }
        for placeholder in _referenced_placeholders(self._template):
            if placeholder not in values:
                raise UrlMappingError(f"Unknown placeholder in URL template: {placeholder}")
            if not values[placeholder]:
                raise UrlMappingError(
                    f"A value for '{placeholder}' is required by the URL template."
                )
        try:
            url = self._template.format(**values)
        except (KeyError, IndexError, ValueError) as exc:
            raise UrlMappingError(f"Invalid URL template {self._template!r}: {exc}") from exc
        return _append_query(url, query_params)


def _referenced_placeholders(template: str) -> set[str]:
    try:
        parsed = list(Formatter().parse(template))
    except ValueError as exc:
        raise UrlMappingError(f"Invalid URL template {template!r}: {exc}") from exc
    return {field_name for _, field_name, _, _ in parsed if field_name is not None}


def _append_query(url: str, query_params: str) -> str:
    query = query_params.lstrip("?&")
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"
