from gemgate.gemtext import (
    Blockquote, EmptyLine, Heading, Link, ListItem, Preformatted, SubHeading,
    SubSubHeading, Text, parse, to_html,
)


def typed(nodes):
    return [(type(node).__name__, tuple(node)) for node in nodes]


class TestParse:
    def test_line_types(self):
        doc = "\n".join([
            "# Title",
            "## Section",
            "### Sub",
            "plain words",
            "* item",
            "> quoted",
            "=> gemini://host/page A page",
            "",
        ])
        assert typed(parse(doc)) == typed([
            Heading("Title"),
            SubHeading("Section"),
            SubSubHeading("Sub"),
            Text("plain words"),
            ListItem("item"),
            Blockquote("quoted"),
            Link("gemini://host/page", "A page"),
            EmptyLine(),
        ])

    def test_link_without_label(self):
        assert typed(parse("=>  page2")) == typed([Link("page2", None)])

    def test_link_without_target_is_text(self):
        assert typed(parse("=>")) == typed([Text("=>")])

    def test_crlf_line_endings(self):
        assert typed(parse("# A\r\nb\r\n")) == typed([Heading("A"), Text("b"), EmptyLine()])

    def test_preformatted_block(self):
        doc = "```python\nx = 1\n# not a heading\n```\nafter"
        assert typed(parse(doc)) == typed([
            Preformatted("x = 1\n# not a heading", "python"),
            Text("after"),
        ])

    def test_preformatted_without_alt(self):
        assert typed(parse("```\nraw\n```")) == typed([Preformatted("raw", None)])

    def test_unterminated_block_closes_at_end(self):
        assert typed(parse("```\none\ntwo")) == typed([Preformatted("one\ntwo", None)])

    def test_star_without_space_is_text(self):
        assert typed(parse("*bold*")) == typed([Text("*bold*")])


class TestToHtml:
    def test_empty_input(self):
        assert to_html("", "/host") == ""

    def test_only_empty_lines(self):
        assert to_html("\n\n   \n", "/host") == ""

    def test_nodes_in_order_without_separators(self):
        html = to_html("# T\n\n## S\n### U\nhello\n* one\n> q", "/host")
        assert html == (
            "<h1>T</h1><h2>S</h2><h3>U</h3><p>hello</p>"
            "<p>&#x2022; one</p><blockquote>q</blockquote>"
        )

    def test_text_is_not_escaped(self):
        assert to_html("a <b>bold</b> move", "/host") == "<p>a <b>bold</b> move</p>"

    def test_preformatted_with_language(self):
        assert to_html("```rust\nfn main() {}\n```", "/host") == (
            '<pre><code class="language-rust">fn main() {}</code></pre>'
        )

    def test_preformatted_alt_text_uses_first_word(self):
        assert to_html("```py example code\nx\n```", "/host") == (
            '<pre><code class="language-py">x</code></pre>'
        )

    def test_preformatted_without_language(self):
        assert to_html("```\nx\n```", "/host") == "<pre><code>x</code></pre>"

    def test_web_link(self):
        assert to_html("=> https://example.com Example", "/host") == (
            '<p><a href="https://example.com">Example</a></p>'
        )

    def test_web_link_matched_anywhere(self):
        html = to_html("=> /redirect?to=http://example.com out", "/host")
        assert html == '<p><a href="/redirect?to=http://example.com">out</a></p>'

    def test_absolute_gemini_link(self):
        assert to_html("=> gemini://foo.bar/baz Baz", "/host") == (
            '<p><a href="/gemini/foo.bar/baz">Baz</a></p>'
        )

    def test_relative_link(self):
        assert to_html("=> page2 Next", "/articles") == (
            '<p><a href="/gemini/articles/page2">Next</a> (page2)</p>'
        )

    def test_link_label_defaults_to_empty(self):
        assert to_html("=> gemini://foo.bar/", "/host") == '<p><a href="/gemini/foo.bar/"></a></p>'

    def test_idempotent(self):
        doc = "# T\n=> rel r\n=> gemini://x/y y\n```c\nint x;\n```\n"
        assert to_html(doc, "/x/dir") == to_html(doc, "/x/dir")
