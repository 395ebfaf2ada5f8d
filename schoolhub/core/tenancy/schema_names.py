"""Validation of tenant schema names.

Schema names are interpolated into SQL as identifiers, which cannot be bound
parameters, so every name must pass :func:`assert_valid_schema_name` right
before it is used to build a statement.
"""

from __future__ import annotations

import re

from schoolhub.core.tenancy.errors import ValidationError

MAX_SCHEMA_NAME_LENGTH = 63

SHARED_SCHEMA = "shared"

# Placeholder schema the per-tenant tables are declared against; it is
# translated to the real tenant schema at execution time.
TENANT_SCHEMA_PLACEHOLDER = "tenant"

RESERVED_SCHEMA_NAMES = frozenset(
    {
        "public",
        SHARED_SCHEMA,
        TENANT_SCHEMA_PLACEHOLDER,
        "information_schema",
        "pg_catalog",
        "pg_toast",
    }
)

_SCHEMA_NAME_RE = re.compile(r"[a-z][a-z0-9_]{0,62}")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


def is_reserved_schema_name(name: str) -> bool:
    return name in RESERVED_SCHEMA_NAMES or name.startswith("pg_")


def assert_valid_schema_name(candidate: object) -> str:
    """Return ``candidate`` unchanged if it is a safe schema identifier.

    Raises :class:`ValidationError` otherwise. Callers must not catch the
    error and go on to build SQL from the rejected value.
    """
    if not isinstance(candidate, str):
        raise ValidationError(candidate, "must be a string")
    if not candidate:
        raise ValidationError(candidate, "must not be empty")
    if len(candidate) > MAX_SCHEMA_NAME_LENGTH:
        raise ValidationError(candidate, f"must be at most {MAX_SCHEMA_NAME_LENGTH} characters")
    if _SCHEMA_NAME_RE.fullmatch(candidate) is None:
        raise ValidationError(
            candidate,
            "must start with a lowercase letter and contain only lowercase letters, digits and underscores",
        )
    if is_reserved_schema_name(candidate):
        raise ValidationError(candidate, "is reserved")
    return candidate


def slugify_schema_name(name: str, *, reserve: int = 0) -> str:
    """Derive a schema name candidate from a display name.

    ``reserve`` characters are kept free at the end for a collision suffix.
    The result still has to go through :func:`assert_valid_schema_name`.
    """
    slug = _SLUG_STRIP_RE.sub("_", name.strip().lower()).strip("_")
    if not slug:
        slug = "school"
    elif not slug[0].isalpha() or slug.startswith("pg_"):
        # No numeric suffix can make a "pg_" name usable.
        slug = f"t_{slug}"
    limit = MAX_SCHEMA_NAME_LENGTH - reserve
    return slug[:limit].rstrip("_")


def with_suffix(base: str, attempt: int) -> str:
    if attempt <= 1:
        return base
    suffix = f"_{attempt}"
    return f"{base[: MAX_SCHEMA_NAME_LENGTH - len(suffix)]}{suffix}"


def qualified_table(schema_name: str, table: str) -> str:
    return f"{assert_valid_schema_name(schema_name)}.{table}"
