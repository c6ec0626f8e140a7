"""Resolution of collaborator factories named in the test plan."""

from __future__ import annotations

import importlib

from .collaborator_contracts import CollaboratorFactory


class CollaboratorLoadingError(Exception):
    """Raised when a collaborator factory cannot be imported."""


def load_collaborator_factory(import_path: str) -> CollaboratorFactory:
    """Import `package.module:attribute` and return the callable it names."""
    module_name, separator, attribute_path = import_path.partition(":")
    if not separator or not module_name or not attribute_path:
        raise CollaboratorLoadingError(
            f"Collaborator factory must use the 'package.module:attribute' form: {import_path}"
        )
    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise CollaboratorLoadingError(
            f"Cannot import collaborator module '{module_name}': {exc}"
        ) from exc
    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as exc:
            raise CollaboratorLoadingError(
                f"Collaborator factory '{import_path}' does not exist."
            ) from exc
    if not callable(target):
        raise CollaboratorLoadingError(f"Collaborator factory '{import_path}' is not callable.")
    return target  # type: ignore[return-value]
