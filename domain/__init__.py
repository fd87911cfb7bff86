"""Turns a free text recipe request into a recipe search query.

The pipeline is validate, rate limit, moderate, translate, compile. Only the
first and last steps are pure. Moderation and translation are single calls to
a language model provider and the rate limiter is shared process state.

The translation is constrained by a strict function schema so the model's
answer always has every key, which keeps the compiler free of guards.
"""
