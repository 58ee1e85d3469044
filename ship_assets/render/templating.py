"""Text template evaluation - replaces ``${KEY}`` tokens.

Performs **text-level** token replacement so everything around a token
is preserved byte-for-byte across runs.  Only upper-case keys
(``${CLUSTER_NAME}``) are tokens; terraform interpolations such as
``${var.vpc_cidr}`` or ``${module.vpc.vpc_id}`` pass through untouched.
"""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Mapping, Optional

# ── constants ────────────────────────────────────────────────────────

TOKEN_PATTERN = re.compile(r"\$\{([A-Z][A-Z0-9_]*)\}")

_TRUE_WORDS: FrozenSet[str] = frozenset({"true", "yes", "1"})
_FALSE_WORDS: FrozenSet[str] = frozenset({"false", "no", "0"})


class TemplateError(ValueError):
    """A template could not be evaluated."""


# ── public API ───────────────────────────────────────────────────────


def render_template(
    template_text: str,
    substitutions: Mapping[str, str],
    *,
    required_keys: Optional[FrozenSet[str]] = None,
    strict: bool = False,
) -> str:
    """Replace ``${KEY}`` tokens in *template_text*.

    Parameters
    ----------
    template_text:
        Raw template content.
    substitutions:
        Mapping of key → value, keys without the ``${}`` wrapper.
    required_keys:
        Keys that **must** be present in *substitutions* with a non-empty
        value.  Defaults to none.
    strict:
        When true, a token with no entry in *substitutions* is an error
        instead of being left in place.

    Returns
    -------
    str
        Template text with every known token replaced.  Replacement is a
        single pass, so values are never themselves re-expanded.

    Raises
    ------
    TemplateError
        If a required key is missing or empty, or (strict) a token is
        unresolved.
    """
    missing: List[str] = sorted(
        k for k in (required_keys or frozenset()) if not substitutions.get(k)
    )
    if missing:
        raise TemplateError(
            f"Missing required substitution key(s): {', '.join(missing)}"
        )

    if strict:
        unresolved = sorted(
            {m.group(1) for m in TOKEN_PATTERN.finditer(template_text)}
            - set(substitutions)
        )
        if unresolved:
            raise TemplateError(
                f"Unresolved template token(s): {', '.join(unresolved)}"
            )

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in substitutions:
            return str(substitutions[key])
        return match.group(0)

    return TOKEN_PATTERN.sub(_replace, template_text)


def evaluate_when(expr: str, substitutions: Mapping[str, str]) -> bool:
    """Evaluate an asset ``when`` predicate.

    An empty predicate is true.  After substitution the text must be one
    of ``true/yes/1`` or ``false/no/0`` (case-insensitive).
    """
    if not expr or not expr.strip():
        return True
    rendered = render_template(expr, substitutions).strip().lower()
    if rendered in _TRUE_WORDS:
        return True
    if rendered in _FALSE_WORDS:
        return False
    raise TemplateError(f"'when' did not evaluate to a boolean: {expr!r} -> {rendered!r}")


def context_from_values(values: Mapping[str, object]) -> Dict[str, str]:
    """Stringify a template context.

    ``None`` becomes ``""`` and booleans become ``"true"``/``"false"``.
    """
    out: Dict[str, str] = {}
    for key, value in values.items():
        if value is None:
            out[str(key)] = ""
        elif isinstance(value, bool):
            out[str(key)] = "true" if value else "false"
        else:
            out[str(key)] = str(value)
    return out
