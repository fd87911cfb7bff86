TRANSLATE_QUERY_PROMPT = """
Your job is to convert the user's recipe request into the parameters of a call
to the Spoonacular complex recipe search. Always answer by calling the
translate_to_api_query function.

Only fill in parameters the user actually mentions. Every parameter must still
be present: use an empty array for list parameters and null for type and
maxReadyTime when they are not mentioned.

Take note of the following parameter notes:
query - the dish or general thing being searched for, e.g. pasta ;
cuisine - one or more cuisines the recipes should match ;
excludeCuisine - one or more cuisines the recipes must not match ;
diet - each diet is paired with a connector. Diets joined with AND must all be
satisfied, e.g. gluten free AND vegetarian means the recipes must be both.
Diets joined with OR are alternatives, e.g. vegan OR vegetarian. A single diet
uses the OR connector ;
intolerances - one or more intolerances the recipes must account for ;
includeIngredients - one or more ingredients that should be used ;
excludeIngredients - one or more ingredients or ingredient types that must not
be used ;
type - the type of meal, e.g. main, dessert, soup ;
maxReadyTime - the maximum preparation and cooking time in whole minutes.
"""
