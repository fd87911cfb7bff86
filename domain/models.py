from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Cuisine(StrEnum):
    AFRICAN = "African"
    ASIAN = "Asian"
    AMERICAN = "American"
    BRITISH = "British"
    CAJUN = "Cajun"
    CARIBBEAN = "Caribbean"
    CHINESE = "Chinese"
    EASTERN_EUROPEAN = "Eastern European"
    EUROPEAN = "European"
    FRENCH = "French"
    GERMAN = "German"
    GREEK = "Greek"
    INDIAN = "Indian"
    IRISH = "Irish"
    ITALIAN = "Italian"
    JAPANESE = "Japanese"
    JEWISH = "Jewish"
    KOREAN = "Korean"
    LATIN_AMERICAN = "Latin American"
    MEDITERRANEAN = "Mediterranean"
    MEXICAN = "Mexican"
    MIDDLE_EASTERN = "Middle Eastern"
    NORDIC = "Nordic"
    SOUTHERN = "Southern"
    SPANISH = "Spanish"
    THAI = "Thai"
    VIETNAMESE = "Vietnamese"


class Diet(StrEnum):
    GLUTEN_FREE = "gluten free"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"


class Connector(StrEnum):
    AND = "AND"
    OR = "OR"
    NONE = "none"


class Intolerance(StrEnum):
    DAIRY = "Dairy"
    EGG = "Egg"
    GLUTEN = "Gluten"
    GRAIN = "Grain"
    PEANUT = "Peanut"
    SEAFOOD = "Seafood"
    SESAME = "Sesame"
    SHELLFISH = "Shellfish"
    SOY = "Soy"
    SULFITE = "Sulfite"
    TREE = "Tree"
    NUT = "Nut"
    WHEAT = "Wheat"


class MealType(StrEnum):
    MAIN = "main"
    COURSE = "course"
    SIDE = "side"
    DISH = "dish"
    DESSERT = "dessert"
    APPETIZER = "appetizer"
    SALAD = "salad"
    BREAD = "bread"
    BREAKFAST = "breakfast"
    SOUP = "soup"
    BEVERAGE = "beverage"
    SAUCE = "sauce"
    MARINADE = "marinade"
    FINGERFOOD = "fingerfood"
    SNACK = "snack"
    DRINK = "drink"


class DietEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    diet: Diet
    connector: Connector


class RecipeQuerySpec(BaseModel):
    """Structured recipe search produced by the translator.

    Every field is required so a spec parsed from model output always carries
    the full set of keys, even when they are empty.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    query: str
    cuisine: tuple[Cuisine, ...]
    exclude_cuisine: tuple[Cuisine, ...] = Field(alias="excludeCuisine")
    diet: tuple[DietEntry, ...]
    intolerances: tuple[Intolerance, ...]
    include_ingredients: tuple[str, ...] = Field(alias="includeIngredients")
    exclude_ingredients: tuple[str, ...] = Field(alias="excludeIngredients")
    type: MealType | None
    max_ready_time: int | None = Field(alias="maxReadyTime", ge=0)


TOOL_NAME = "translate_to_api_query"


def _enum_def(values: type[StrEnum], description: str) -> dict[str, Any]:
    return {
        "type": "string",
        "description": description,
        "enum": [v.value for v in values],
    }


def _array_of(ref: str, description: str) -> dict[str, Any]:
    return {
        "type": "array",
        "items": {"$ref": f"#/$defs/{ref}"},
        "description": description,
    }


QUERY_SPEC_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "The (natural language) recipe search query",
        },
        "cuisine": _array_of(
            "cuisine",
            "If any of the cuisine values are mentioned in the user's query, add "
            "each of those cuisine values found to the array. Otherwise this can be "
            "an empty array.",
        ),
        "excludeCuisine": _array_of(
            "cuisine",
            "If any of the cuisine values are mentioned in the user's query as a "
            "cuisine that should not be included in the search, add each of those "
            "cuisine values to the array. Otherwise this can be an empty array.",
        ),
        "diet": _array_of(
            "diet",
            "If any of the diet values are mentioned in the user's query as a diet "
            "for which the recipes must be suitable, add an entry for each. Use the "
            "AND connector when recipes must suit every diet and the OR connector "
            "when any of them will do. Otherwise this can be an empty array.",
        ),
        "intolerances": _array_of(
            "intolerances",
            "If any of the intolerance values are mentioned in the user's query as "
            "an intolerance for which the recipes must account, add each of those "
            "intolerance values found to the array. Otherwise this can be an empty "
            "array.",
        ),
        "includeIngredients": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "If the user mentions any ingredients to be included in the recipe, "
                "add each of those ingredients to the array as a separate value. If "
                "no ingredients are mentioned in the user's query, this can be an "
                "empty array."
            ),
        },
        "excludeIngredients": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "If the user mentions any ingredients to be excluded from the "
                "recipe, add each of those ingredients to the array as a separate "
                "value. If no ingredients are mentioned in the user's query, this "
                "can be an empty array."
            ),
        },
        "type": {
            "type": ["string", "null"],
            "description": (
                "If any of the type values are mentioned in the user's query, assign "
                "that value as the type. If no type is mentioned, this can be a null "
                "value."
            ),
            "enum": [t.value for t in MealType] + [None],
        },
        "maxReadyTime": {
            "type": ["integer", "null"],
            "description": (
                "The maximum time in minutes it should take to prepare and cook the "
                "recipe. If no maximum time is mentioned in the user's query, this "
                "can be a null value."
            ),
            "minimum": 0,
        },
    },
    "$defs": {
        "cuisine": _enum_def(Cuisine, "Available cuisine values to choose from"),
        "diet": {
            "type": "object",
            "description": "A diet and how it combines with the other diets",
            "properties": {
                "diet": _enum_def(Diet, "Available diet values to choose from"),
                "connector": _enum_def(
                    Connector,
                    "AND if recipes must also suit the other AND diets, OR if any "
                    "of the diets will do. A single diet uses OR. none marks an "
                    "entry to be ignored",
                ),
            },
            "required": ["diet", "connector"],
            "additionalProperties": False,
        },
        "intolerances": _enum_def(
            Intolerance, "Available intolerances values to choose from"
        ),
    },
    "required": [
        "query",
        "cuisine",
        "excludeCuisine",
        "diet",
        "intolerances",
        "includeIngredients",
        "excludeIngredients",
        "type",
        "maxReadyTime",
    ],
    "additionalProperties": False,
}


TRANSLATE_TOOL: dict[str, Any] = {
    "type": "function",
    "name": TOOL_NAME,
    "description": (
        "Translate the user's query into a set of parameters in preparation for a "
        "call to a recipe API."
    ),
    "parameters": QUERY_SPEC_SCHEMA,
    "strict": True,
}
