"""Application URL mapper tests."""

from __future__ import annotations

import pytest
from simple_suite_runner.url_mapping import TemplateUrlMapper, UrlMappingError


def test_default_template_uses_domain_and_app_name() -> None:
    url = TemplateUrlMapper().generate_test_url("Expense App", "User1", "apps.example.com")

    assert url == "https://apps.example.com/play/Expense%20App"


def test_query_params_are_appended_with_question_mark() -> None:
    url = TemplateUrlMapper().generate_test_url("app", "User1", "host", "tenant=1")

    assert url == "https://host/play/app?tenant=1"


def test_query_params_are_appended_with_ampersand_when_template_has_query() -> None:
    mapper = TemplateUrlMapper("https://{domain}/run?app={app_logical_name}&as={persona}")

    url = mapper.generate_test_url("app", "Admin", "host", "?debug=true")

    assert url == "https://host/run?app=app&as=Admin&debug=true"


def test_missing_app_logical_name_is_rejected() -> None:
    with pytest.raises(UrlMappingError, match="App logical name is required"):
        TemplateUrlMapper().generate_test_url("", "User1", "host")


def test_unknown_template_placeholder_is_rejected() -> None:
    mapper = TemplateUrlMapper("https://{domain}/{tenant}/{app_logical_name}")

    with pytest.raises(UrlMappingError, match="Unknown placeholder"):
        mapper.generate_test_url("app", "User1", "host")


def test_empty_domain_is_rejected_when_template_references_it() -> None:
    with pytest.raises(UrlMappingError, match="'domain' is required"):
        TemplateUrlMapper().generate_test_url("app", "User1", "")


def test_empty_domain_is_accepted_when_template_does_not_reference_it() -> None:
    mapper = TemplateUrlMapper("https://fixed.example.com/play/{app_logical_name}")

    assert mapper.generate_test_url("app", "User1") == "https://fixed.example.com/play/app"


def test_malformed_template_is_rejected() -> None:
    with pytest.raises(UrlMappingError, match="Invalid URL template"):
        TemplateUrlMapper("https://{domain/play").generate_test_url("app", "User1", "host")
