"""Tests for ship_assets.render.templating."""

from __future__ import annotations

import pytest

from ship_assets.render.templating import (
    TemplateError,
    context_from_values,
    evaluate_when,
    render_template,
)


# ── fixtures ─────────────────────────────────────────────────────────

MINI_TEMPLATE = (
    "Region: ${REGION}\n"
    "ClusterName: ${CLUSTER_NAME}\n"
    'vpc = "${module.vpc.vpc_id}"\n'
)

MINIMAL_SUBS = {
    "REGION": "us-west-2",
    "CLUSTER_NAME": "test-cluster",
}


# ── TestRenderTemplate ───────────────────────────────────────────────


class TestRenderTemplate:
    def test_basic_substitution(self):
        result = render_template(MINI_TEMPLATE, MINIMAL_SUBS)
        assert "us-west-2" in result
        assert "${REGION}" not in result

    def test_terraform_interpolation_untouched(self):
        result = render_template(MINI_TEMPLATE, MINIMAL_SUBS)
        assert 'vpc = "${module.vpc.vpc_id}"' in result

    def test_preserves_non_token_text(self):
        result = render_template(MINI_TEMPLATE, MINIMAL_SUBS)
        assert result.startswith("Region: us-west-2\n")

    def test_unknown_token_left_in_place(self):
        assert render_template("Hello: ${OTHER}\n", MINIMAL_SUBS) == "Hello: ${OTHER}\n"

    def test_lowercase_key_not_a_token(self):
        assert render_template("${region}", {"region": "x"}) == "${region}"

    def test_single_pass(self):
        subs = {"A": "${B}", "B": "never"}
        assert render_template("${A}", subs) == "${B}"

    def test_missing_required_key_raises(self):
        with pytest.raises(TemplateError, match="REGION"):
            render_template(MINI_TEMPLATE, {}, required_keys=frozenset({"REGION"}))

    def test_empty_required_key_raises(self):
        subs = dict(MINIMAL_SUBS, REGION="")
        with pytest.raises(TemplateError, match="REGION"):
            render_template(MINI_TEMPLATE, subs, required_keys=frozenset({"REGION"}))

    def test_missing_keys_sorted(self):
        with pytest.raises(TemplateError, match="A_KEY, B_KEY"):
            render_template("", {}, required_keys=frozenset({"B_KEY", "A_KEY"}))

    def test_strict_unresolved_raises(self):
        with pytest.raises(TemplateError, match="OTHER"):
            render_template("${REGION} ${OTHER}", MINIMAL_SUBS, strict=True)

    def test_strict_ignores_terraform_interpolation(self):
        result = render_template(MINI_TEMPLATE, MINIMAL_SUBS, strict=True)
        assert "${module.vpc.vpc_id}" in result

    def test_template_error_is_value_error(self):
        assert issubclass(TemplateError, ValueError)


class TestByteStability:
    def test_identical_inputs_identical_output(self):
        a = render_template(MINI_TEMPLATE, MINIMAL_SUBS)
        b = render_template(MINI_TEMPLATE, MINIMAL_SUBS)
        assert a == b

    def test_whitespace_preserved(self):
        tpl = "  a: ${REGION}  \n\n\tb\n"
        assert render_template(tpl, MINIMAL_SUBS) == "  a: us-west-2  \n\n\tb\n"


# ── TestEvaluateWhen ─────────────────────────────────────────────────


class TestEvaluateWhen:
    @pytest.mark.parametrize("expr", ["", "   ", "true", "TRUE", "yes", "1", " True "])
    def test_true(self, expr):
        assert evaluate_when(expr, {}) is True

    @pytest.mark.parametrize("expr", ["false", "False", "no", "0"])
    def test_false(self, expr):
        assert evaluate_when(expr, {}) is False

    def test_substituted(self):
        assert evaluate_when("${USE_EKS}", {"USE_EKS": "false"}) is False
        assert evaluate_when("${USE_EKS}", {"USE_EKS": "true"}) is True

    def test_not_boolean(self):
        with pytest.raises(TemplateError, match="boolean"):
            evaluate_when("${USE_EKS}", {})


class TestContextFromValues:
    def test_stringifies(self):
        assert context_from_values({"A": 1, "B": None, "C": "x"}) == {
            "A": "1",
            "B": "",
            "C": "x",
        }

    def test_booleans_lowercase(self):
        assert context_from_values({"T": True, "F": False}) == {"T": "true", "F": "false"}
