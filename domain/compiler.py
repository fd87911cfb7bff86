from itertools import groupby
from typing import Iterable
from urllib.parse import quote

from domain.models import Connector, DietEntry, RecipeQuerySpec


def _escape(value: str) -> str:
    # Separators inside a value must not read as separators on the wire
    return quote(value.strip(), safe=" ")


def _join(values: Iterable[str]) -> str:
    return ",".join(_escape(v) for v in values if v.strip())


def compile_diet(entries: Iterable[DietEntry]) -> str:
    entries = [e for e in entries if e.connector != Connector.NONE]
    groups: list[str] = []
    for connector, group in groupby(entries, key=lambda e: e.connector):
        sep = "," if connector == Connector.AND else "|"
        groups.append(sep.join(_escape(e.diet.value) for e in group))
    return "|".join(groups)


def compile_query(spec: RecipeQuerySpec) -> str:
    """Query string for the recipe search, e.g. ``?query=pasta&diet=vegan``.

    Keys with no value are left out.
    """
    max_ready_time = spec.max_ready_time
    params: list[tuple[str, str]] = [
        ("query", _escape(spec.query)),
        ("cuisine", _join(spec.cuisine)),
        ("excludeCuisine", _join(spec.exclude_cuisine)),
        ("diet", compile_diet(spec.diet)),
        ("intolerances", _join(spec.intolerances)),
        ("includeIngredients", _join(spec.include_ingredients)),
        ("excludeIngredients", _join(spec.exclude_ingredients)),
        ("type", spec.type.value if spec.type else ""),
        ("maxReadyTime", str(max_ready_time) if max_ready_time and max_ready_time > 0 else ""),
    ]
    return "?" + "&".join(f"{key}={value}" for key, value in params if value)
