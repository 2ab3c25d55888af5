"""Ingredient classification and formatting for the recipe detail view.

Provides classify_ingredients(text), render_ingredient_groups(simple, harder)
and format_ingredient_lines(recipe).
"""
from typing import Iterable, List, Tuple

from grocery.domain.Recipe import Recipe
from grocery.utilities.constants import BULLET, HARDER_GROUP_LABEL, HARDER_INGREDIENTS, SIMPLE_GROUP_LABEL


def _is_harder(token: str, reference: Iterable[str]) -> bool:
    lowered = token.lower()
    return any(ref in lowered for ref in reference)


def classify_ingredients(text: str, reference: Iterable[str] = HARDER_INGREDIENTS) -> Tuple[List[str], List[str]]:
    """Split comma separated ingredients into (simple, harder).

    Args:
        text: e.g. "Pepperoni, Lettuce". Tokens are trimmed, empty ones dropped.
        reference: lower case substrings marking an ingredient as harder to find.

    Returns:
        Two lists preserving input order; a token containing any reference entry
        (case-insensitive) goes to harder, every other token to simple.
    """
    reference = tuple(reference)
    simple: List[str] = []
    harder: List[str] = []
    for raw in (text or '').split(','):
        token = raw.strip()
        if not token:
            continue
        (harder if _is_harder(token, reference) else simple).append(token)
    return simple, harder


def _block(label: str, names: List[str]) -> str:
    return "\n".join([label] + [f"{BULLET} {n}" for n in names])


def render_ingredient_groups(simple: List[str], harder: List[str]) -> str:
    """Two labelled bullet blocks separated by a blank line; empty groups are left out."""
    blocks = []
    if simple:
        blocks.append(_block(SIMPLE_GROUP_LABEL, simple))
    if harder:
        blocks.append(_block(HARDER_GROUP_LABEL, harder))
    return "\n\n".join(blocks)


def format_ingredient_lines(recipe: Recipe) -> str:
    lines = []
    for name, measure in recipe.ingredient_pairs():
        if not name.strip():
            continue
        measure = (measure or '').strip()
        lines.append(f"{BULLET} {name.strip()} ({measure})" if measure else f"{BULLET} {name.strip()}")
    return "\n".join(lines)


__all__ = ['classify_ingredients', 'render_ingredient_groups', 'format_ingredient_lines']
