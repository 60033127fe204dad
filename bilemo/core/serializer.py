"""
Group and version based serialization.

Which fields of an entity reach the wire is decided by a declarative table:
each serialization group lists its fields, and a field may require a minimum
API version before it is emitted. Serialization happens in two steps:

1. ``normalize`` turns an entity into a plain dict holding every field of the
   group. This step depends only on the entity, so its output can be cached.
2. ``project`` applies the caller-specific parts: the version gate and the
   hypermedia links (some of which are reserved to admins).
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from fastapi.encoders import jsonable_encoder

PRODUCTS_GROUP = "getProducts"
USERS_GROUP = "getUsers"


@dataclass(frozen=True)
class FieldRule:
    name: str
    since_version: Optional[float] = None

    def visible_at(self, version: Optional[float]) -> bool:
        if self.since_version is None:
            return True
        return version is not None and version >= self.since_version


@dataclass(frozen=True)
class LinkRule:
    rel: str
    route_name: str
    path_param: str
    admin_only: bool = False


SERIALIZATION_GROUPS: Dict[str, Tuple[FieldRule, ...]] = {
    PRODUCTS_GROUP: (
        FieldRule("id"),
        FieldRule("title"),
        FieldRule("price"),
        FieldRule("description"),
        FieldRule("features"),
        FieldRule("text"),
    ),
    USERS_GROUP: (
        FieldRule("id"),
        FieldRule("username"),
        FieldRule("comment", since_version=2.0),
    ),
}

GROUP_LINKS: Dict[str, Tuple[LinkRule, ...]] = {
    PRODUCTS_GROUP: (
        LinkRule("self", "get_product", "product_id"),
        LinkRule("delete", "delete_product", "product_id", admin_only=True),
    ),
}


@dataclass
class SerializationContext:
    """Caller-specific serialization settings."""
    group: str
    version: Optional[float] = None
    is_admin: bool = False
    url_for: Optional[Callable[..., Any]] = None


def _rules(group: str) -> Tuple[FieldRule, ...]:
    try:
        return SERIALIZATION_GROUPS[group]
    except KeyError:
        raise ValueError(f"Unknown serialization group: {group}")


def normalize(obj: Any, group: str) -> Dict[str, Any]:
    """Every field of ``group`` read from ``obj``, JSON-ready."""
    return {rule.name: jsonable_encoder(getattr(obj, rule.name, None)) for rule in _rules(group)}


def normalize_many(objs: Iterable[Any], group: str) -> List[Dict[str, Any]]:
    return [normalize(obj, group) for obj in objs]


def _links(data: Dict[str, Any], context: SerializationContext) -> Dict[str, Dict[str, str]]:
    links = {}
    for rule in GROUP_LINKS.get(context.group, ()):
        if rule.admin_only and not context.is_admin:
            continue
        href = context.url_for(rule.route_name, **{rule.path_param: data["id"]})
        links[rule.rel] = {"href": str(href)}
    return links


def project(data: Dict[str, Any], context: SerializationContext) -> Dict[str, Any]:
    """Apply the version gate and attach links to a normalized dict."""
    payload = {
        rule.name: data[rule.name]
        for rule in _rules(context.group)
        if rule.name in data and rule.visible_at(context.version)
    }
    if context.url_for is not None and data.get("id") is not None:
        links = _links(data, context)
        if links:
            payload["_links"] = links
    return payload


def to_payload(
    obj: Union[Any, Iterable[Any]], context: SerializationContext
) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """Normalize and project an entity or a list of entities in one go."""
    if isinstance(obj, (list, tuple)):
        return [project(normalize(item, context.group), context) for item in obj]
    return project(normalize(obj, context.group), context)
