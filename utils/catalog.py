"""
Category directory shared by the API and the feed client.

The "All" filter is synthetic: it is not a row in portfolio_categories and
resolves at query time to every active, unprotected category.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

ALL_CATEGORY = "All"


class FeedFetchError(Exception):
    """A feed page could not be fetched; callers must not treat it as an empty page."""


@dataclass(frozen=True)
class CategoryInfo:
    name: str
    display_order: int = 0
    is_active: bool = True
    is_password_protected: bool = False


@dataclass
class FeedPage:
    items: List[Dict[str, Any]] = field(default_factory=list)
    has_more: bool = False

    @classmethod
    def from_items(cls, items: List[Dict[str, Any]], page_size: int) -> "FeedPage":
        # No total count is fetched: a full page is the only "more" signal
        return cls(items=list(items), has_more=len(items) == page_size)


class CategoryDirectory:
    def __init__(self, categories: Iterable[CategoryInfo] = (), protected: Iterable[str] = ()):
        self._categories = sorted(categories, key=lambda c: c.display_order)
        self._by_name = {c.name: c for c in self._categories}
        # Gated names, including categories that are not listed as filters
        self._protected = {c.name for c in self._categories if c.is_password_protected}
        self._protected.update(n for n in protected if n)

    @classmethod
    def from_rows(cls, rows: Iterable[Any]) -> "CategoryDirectory":
        return cls(
            CategoryInfo(
                name=r.name,
                display_order=r.display_order or 0,
                is_active=bool(r.is_active),
                is_password_protected=bool(r.is_password_protected),
            )
            for r in rows
        )

    @classmethod
    def from_dicts(cls, payload: Iterable[Dict[str, Any]], protected: Iterable[str] = ()) -> "CategoryDirectory":
        return cls(
            (
                CategoryInfo(
                    name=str(d.get("name") or ""),
                    display_order=int(d.get("displayOrder") or 0),
                    is_active=bool(d.get("isActive", True)),
                    is_password_protected=bool(d.get("isPasswordProtected")),
                )
                for d in payload
                if d.get("name")
            ),
            protected=protected,
        )

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self):
        return iter(self._categories)

    def get(self, name: str) -> Optional[CategoryInfo]:
        return self._by_name.get(name)

    def list_filter_options(self) -> List[str]:
        return [ALL_CATEGORY] + [c.name for c in self._categories if c.is_active]

    def is_protected(self, name: str) -> bool:
        if name == ALL_CATEGORY:
            return False
        return name in self._protected

    def public_names(self) -> List[str]:
        return [c.name for c in self._categories if c.is_active and not c.is_password_protected]
