# File: pothosgen/naming.py
"""
pothosgen - Name Derivation
===========================
Derives every identifier the emitters need from a model name.

One model name yields one ``DerivedNames`` bundle: the CRUD operation names,
the GraphQL query names, the input-type names and the Prisma client accessor.
All emitted artifacts read their names from this bundle, so a model is
referred to identically everywhere.

Two pluralisation lines are carried side by side:

- ``find_many`` is the GraphQL list query (``Address`` → ``addresss``).
- ``find_many_collapsed`` collapses a trailing ``ss`` (``Address`` →
  ``address``); it is consulted when checking whether a hand-written resolver
  already provides the list query.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import List

from pothosgen.utils import (
    lower_first,
    pluralize,
    pluralize_collapsed,
    snake_to_camel,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pothosgen.naming")


# ---------------------------------------------------------------------------
# Derived-name bundle
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DerivedNames:
    """Identifiers derived from one model name."""

    model: str
    create: str
    create_many: str
    update: str
    find: str
    find_many: str
    find_many_collapsed: str
    aggregate: str
    create_input: str
    create_many_input: str
    update_input: str
    where_input: str
    where_unique_input: str
    order_by_input: str
    query_new2: str

    @property
    def list_query_names(self) -> List[str]:
        """Both spellings of the list query, de-duplicated, in order."""
        if self.find_many == self.find_many_collapsed:
            return [self.find_many]
        return [self.find_many, self.find_many_collapsed]

    def __repr__(self) -> str:
        return f"<DerivedNames {self.model}: {self.find}/{self.find_many}>"


@functools.lru_cache(maxsize=None)
def derive_names(model_name: str) -> DerivedNames:
    """
    Derive the full name bundle for *model_name*.

    Pure and cached; the same name always returns the same bundle.

    Examples:
        >>> n = derive_names("Post")
        >>> n.create, n.update, n.find, n.find_many
        ('createOnePost', 'updateOnePost', 'post', 'posts')
        >>> derive_names("Category").find_many
        'categories'
        >>> derive_names("User_Profile").find, derive_names("User_Profile").query_new2
        ('userProfile', 'user_Profile')
    """
    find: str = snake_to_camel(lower_first(model_name))
    names = DerivedNames(
        model=model_name,
        create=f"createOne{model_name}",
        create_many=f"createMany{model_name}",
        update=f"updateOne{model_name}",
        find=find,
        find_many=pluralize(find),
        find_many_collapsed=pluralize_collapsed(find),
        aggregate=f"aggregate{model_name}",
        create_input=f"{model_name}CreateInput",
        create_many_input=f"{model_name}CreateManyInput",
        update_input=f"{model_name}UpdateInput",
        where_input=f"{model_name}WhereInput",
        where_unique_input=f"{model_name}WhereUniqueInput",
        order_by_input=f"{model_name}OrderByInput",
        query_new2=lower_first(model_name),
    )
    logger.debug("Derived names for %s: %r", model_name, names)
    return names


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DerivedNames",
    "derive_names",
]

logger.debug("pothosgen.naming loaded — %d public symbols.", len(__all__))
