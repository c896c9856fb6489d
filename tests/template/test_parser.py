"""
Tests for the template parser.
"""

import pytest

from vw.conditions.model import (
    CompareCondition,
    GroupCondition,
    LiteralCondition,
    NotCondition,
    VariableCondition,
)
from vw.template.nodes import (
    CommentNode,
    ConditionalBlockNode,
    ExtendsNode,
    ForBlockNode,
    IncludeNode,
    JsonNode,
    SectionEnd,
    SectionEndNode,
    SectionStartNode,
    TextNode,
    VariableNode,
    YieldNode,
)
from vw.template.parser import parse_template
from vw.template.tokens import ParserError


class TestPlaceholders:

    def test_variable(self):
        assert parse_template("${ user.name }") == [VariableNode(path="user.name")]

    def test_raw_variable(self):
        assert parse_template("${raw:bio}") == [VariableNode(path="bio", raw=True)]

    def test_yield_placeholder(self):
        assert parse_template("${yield:sidebar}") == [YieldNode(name="sidebar")]

    def test_text_around_placeholder(self):
        assert parse_template("a${x}b") == [TextNode("a"), VariableNode("x"), TextNode("b")]

    @pytest.mark.parametrize("source", ["${}", "${  }", "${1abc}", "${a b}", "${foo:bar}"])
    def test_invalid_placeholders(self, source):
        with pytest.raises(ParserError):
            parse_template(source)


class TestDirectives:

    def test_extends_and_include(self):
        ast = parse_template('{% extends layouts.app %}{% include "partials.nav" %}')
        assert ast == [ExtendsNode("layouts.app"), IncludeNode("partials.nav")]

    def test_section_ends(self):
        ast = parse_template(
            "{% section a %}{% endsection %}"
            "{% section b %}{% stop %}"
            "{% section c %}{% append %}"
            "{% section d %}{% overwrite %}"
            "{% section e %}{% show %}"
        )
        ends = [n.mode for n in ast if isinstance(n, SectionEndNode)]
        assert ends == [
            SectionEnd.APPEND,
            SectionEnd.APPEND,
            SectionEnd.APPEND,
            SectionEnd.OVERWRITE,
            SectionEnd.SHOW,
        ]
        starts = [n.name for n in ast if isinstance(n, SectionStartNode)]
        assert starts == ["a", "b", "c", "d", "e"]

    def test_yield_directive_with_default(self):
        assert parse_template('{% yield footer "(c) me" %}') == [YieldNode("footer", "(c) me")]
        assert parse_template("{% yield footer %}") == [YieldNode("footer", "")]

    def test_comment(self):
        assert parse_template("{# hidden #}") == [CommentNode(" hidden ")]

    def test_unknown_directive(self):
        with pytest.raises(ParserError, match="Unknown directive 'frobnicate'"):
            parse_template("{% frobnicate %}")

    def test_empty_directive(self):
        with pytest.raises(ParserError, match="Empty directive"):
            parse_template("{%  %}")

    def test_end_section_takes_no_args(self):
        with pytest.raises(ParserError, match="takes no arguments"):
            parse_template("{% section a %}{% endsection a %}")

    @pytest.mark.parametrize("source", [
        "{% extends %}",
        "{% extends bad name %}",
        "{% include a..b %}",
        "{% section %}",
        "{% section has space %}",
    ])
    def test_invalid_names(self, source):
        with pytest.raises(ParserError, match="Invalid"):
            parse_template(source)

    def test_error_reports_line_and_column(self):
        with pytest.raises(ParserError) as exc:
            parse_template("ok\n\n  {% nope %}")
        assert (exc.value.line, exc.value.column) == (3, 3)
        assert "at 3:3" in str(exc.value)


class TestConditionals:

    def test_if_elif_else(self):
        ast = parse_template(
            "{% if a %}A{% elif b == 'x' %}B{% else %}C{% endif %}"
        )
        assert len(ast) == 1
        node = ast[0]
        assert isinstance(node, ConditionalBlockNode)
        assert node.condition == VariableCondition("a")
        assert node.body == [TextNode("A")]
        assert len(node.elif_blocks) == 1
        assert isinstance(node.elif_blocks[0].condition, CompareCondition)
        assert node.elif_blocks[0].body == [TextNode("B")]
        assert node.else_block.body == [TextNode("C")]

    def test_missing_endif(self):
        with pytest.raises(ParserError, match="Missing {% endif %}"):
            parse_template("{% if a %}A")

    def test_stray_else(self):
        with pytest.raises(ParserError, match="without matching opener"):
            parse_template("{% else %}")

    def test_invalid_condition(self):
        with pytest.raises(ParserError, match="Invalid condition"):
            parse_template("{% if a AND %}x{% endif %}")

    def test_missing_condition(self):
        with pytest.raises(ParserError, match="Missing condition"):
            parse_template("{% if %}x{% endif %}")


class TestLoops:

    def test_for_with_else(self):
        ast = parse_template("{% for item in order.items %}${item}{% else %}none{% endfor %}")
        node = ast[0]
        assert isinstance(node, ForBlockNode)
        assert node.target == "item"
        assert node.iterable == "order.items"
        assert node.body == [VariableNode("item")]
        assert node.else_block.body == [TextNode("none")]

    def test_missing_endfor(self):
        with pytest.raises(ParserError, match="Missing {% endfor %}"):
            parse_template("{% for x in xs %}x")

    def test_loop_is_reserved(self):
        with pytest.raises(ParserError, match="reserved"):
            parse_template("{% for loop in xs %}{% endfor %}")

    def test_malformed_head(self):
        with pytest.raises(ParserError, match="Invalid for loop"):
            parse_template("{% for xs %}{% endfor %}")

    def test_nested_blocks(self):
        ast = parse_template("{% for x in xs %}{% if x %}y{% endif %}{% endfor %}")
        loop = ast[0]
        assert isinstance(loop.body[0], ConditionalBlockNode)


class TestFallbacksAndJson:

    def test_variable_fallback(self):
        assert parse_template('${name or "guest"}') == [VariableNode("name", default="guest")]

    def test_raw_fallback(self):
        assert parse_template("${raw:bio or '<i>none</i>'}") == [
            VariableNode("bio", raw=True, default="<i>none</i>")
        ]

    def test_yield_fallback(self):
        assert parse_template("${yield:side or 'none'}") == [YieldNode("side", "none")]

    def test_fallback_may_contain_colon_and_or(self):
        assert parse_template('${a or "x: y or z"}') == [VariableNode("a", default="x: y or z")]

    def test_json(self):
        assert parse_template("${json:order.items}") == [JsonNode("order.items")]

    def test_json_rejects_fallback(self):
        with pytest.raises(ParserError, match="fallback"):
            parse_template('${json:data or "[]"}')

    @pytest.mark.parametrize("source", [
        r'{% yield t "\N" %}',
        r'{% yield t "\x4" %}',
        r'${name or "\x4"}',
    ])
    def test_bad_escape_in_literal(self, source):
        with pytest.raises(ParserError, match="Invalid string literal"):
            parse_template(source)


class TestGuards:

    def test_unless(self):
        node = parse_template("{% unless a %}x{% else %}y{% endunless %}")[0]
        assert isinstance(node, ConditionalBlockNode)
        assert node.condition == NotCondition(GroupCondition(VariableCondition("a")))
        assert node.body == [TextNode("x")]
        assert node.else_block.body == [TextNode("y")]
        assert node.elif_blocks == []

    def test_isset(self):
        node = parse_template("{% isset user.name %}x{% endisset %}")[0]
        assert node.condition == CompareCondition(
            VariableCondition("user.name"), LiteralCondition(None), "!="
        )
        assert node.else_block is None

    def test_missing_end(self):
        with pytest.raises(ParserError, match="Missing {% endunless %}"):
            parse_template("{% unless a %}x")
        with pytest.raises(ParserError, match="Missing {% endisset %}"):
            parse_template("{% isset a %}x{% else %}y")

    def test_stray_end(self):
        with pytest.raises(ParserError, match="without matching opener"):
            parse_template("{% endisset %}")

    def test_isset_needs_a_path(self):
        with pytest.raises(ParserError, match="Invalid variable reference"):
            parse_template("{% isset a == b %}{% endisset %}")

    def test_elif_not_allowed_in_unless(self):
        with pytest.raises(ParserError):
            parse_template("{% unless a %}x{% elif b %}y{% endunless %}")
