"""URL mapping exports."""

from .app_url_mapper import DEFAULT_APP_URL_TEMPLATE, TemplateUrlMapper, UrlMappingError

__all__ = ["DEFAULT_APP_URL_TEMPLATE", "TemplateUrlMapper", "UrlMappingError"]
