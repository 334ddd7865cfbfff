"""Gemtext parsing and translation to HTML.

`parse` turns a document into a list of line nodes and `to_html` renders
those nodes as an HTML fragment, rewriting links so that Gemini targets
stay inside the gateway.
"""

import collections

GEMINI_PREFIX = "/gemini"

Text = collections.namedtuple("Text", "text")
Link = collections.namedtuple("Link", "target label")
Heading = collections.namedtuple("Heading", "text")
SubHeading = collections.namedtuple("SubHeading", "text")
SubSubHeading = collections.namedtuple("SubSubHeading", "text")
ListItem = collections.namedtuple("ListItem", "text")
Blockquote = collections.namedtuple("Blockquote", "text")
Preformatted = collections.namedtuple("Preformatted", "body alt")
EmptyLine = collections.namedtuple("EmptyLine", "")


def parse(text):
    nodes = []
    pre = None
    for line in text.split("\n"):
        line = line[:-1] if line.endswith("\r") else line
        if pre is not None:
            if line.startswith("```"):
                nodes.append(Preformatted("\n".join(pre), alt))
                pre = None
            else:
                pre.append(line)
        elif line.startswith("```"):
            pre = []
            alt = line[3:].strip() or None
        elif line.startswith("=>"):
            link = line[2:].split(maxsplit=1)
            if link:
                nodes.append(Link(link[0], link[1].strip() if len(link) > 1 else None))
            else:
                nodes.append(Text(line))
        elif line.startswith("###"):
            nodes.append(SubSubHeading(line[3:].lstrip()))
        elif line.startswith("##"):
            nodes.append(SubHeading(line[2:].lstrip()))
        elif line.startswith("#"):
            nodes.append(Heading(line[1:].lstrip()))
        elif line.startswith("* "):
            nodes.append(ListItem(line[2:].lstrip()))
        elif line.startswith(">"):
            nodes.append(Blockquote(line[1:].lstrip()))
        elif not line.strip():
            nodes.append(EmptyLine())
        else:
            nodes.append(Text(line))

    # unterminated block runs to the end of the document
    if pre is not None:
        nodes.append(Preformatted("\n".join(pre), alt))
    return nodes


def link_html(target, label, request_path):
    """Render one link line, keeping Gemini destinations on the gateway.

    Classification looks for the scheme anywhere in the target, not only
    at its start.
    """
    label = label or ""
    if "http://" in target or "https://" in target:
        return f'<p><a href="{target}">{label}</a></p>'
    if "gemini://" in target:
        return f'<p><a href="{GEMINI_PREFIX}{target.replace("gemini:/", "", 1)}">{label}</a></p>'
    return f'<p><a href="{GEMINI_PREFIX}{request_path}/{target}">{label}</a> ({target})</p>'


def node_html(node, request_path):
    if isinstance(node, Text):
        return f"<p>{node.text}</p>"
    if isinstance(node, Link):
        return link_html(node.target, node.label, request_path)
    if isinstance(node, Heading):
        return f"<h1>{node.text}</h1>"
    if isinstance(node, SubHeading):
        return f"<h2>{node.text}</h2>"
    if isinstance(node, SubSubHeading):
        return f"<h3>{node.text}</h3>"
    if isinstance(node, ListItem):
        return f"<p>&#x2022; {node.text}</p>"
    if isinstance(node, Blockquote):
        return f"<blockquote>{node.text}</blockquote>"
    if isinstance(node, Preformatted):
        if node.alt:
            return f'<pre><code class="language-{node.alt.split()[0]}">{node.body}</code></pre>'
        return f"<pre><code>{node.body}</code></pre>"
    if isinstance(node, EmptyLine):
        return ""
    raise TypeError(f"not a gemtext node: {node!r}")


def to_html(text, request_path):
    return "".join(node_html(node, request_path) for node in parse(text))
