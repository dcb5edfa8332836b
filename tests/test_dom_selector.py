import re
from importlib import resources

from synapse_backend.services import dom_selector
from synapse_backend.services.dom_selector import (
    capture_snippet,
    compute_selector,
    describe_element_at,
    parse_document,
)


def _first(markup, tag, index=0):
    return parse_document(markup).find_all(tag)[index]


def test_same_tag_siblings_get_nth_of_type():
    markup = (
        '<div class="card"><button class="btn primary extra">Buy</button></div>'
        '<div class="card"><button class="btn">Sell</button></div>'
    )
    first = _first(markup, "button", 0)
    second = _first(markup, "button", 1)

    assert compute_selector(first) == "div.card:nth-of-type(1) > button.btn.primary"
    assert compute_selector(second) == "div.card:nth-of-type(2) > button.btn"
    assert compute_selector(first) != compute_selector(second)


def test_id_stops_the_walk():
    markup = '<main><section id="hero"><p>Hi <b>there</b></p></section></main>'
    assert compute_selector(_first(markup, "b")) == "section#hero > p > b"


def test_depth_is_limited():
    markup = "<div><div><div><div><div><span>x</span></div></div></div></div></div>"
    assert compute_selector(_first(markup, "span")) == "div > div > div > span"


def test_body_ends_the_path():
    markup = "<html><body><ul><li>a</li><li>b</li></ul></body></html>"
    assert compute_selector(_first(markup, "li", 1)) == "body > ul > li:nth-of-type(2)"


def test_inspector_classes_are_ignored():
    markup = '<p class="outline-amber-600 lead">x</p>'
    assert compute_selector(_first(markup, "p")) == "p.lead"


def test_snippet_drops_inspector_styles_and_is_bounded():
    markup = '<p style="outline: 2px solid #d97706; cursor: crosshair; color: red">x</p>'
    assert capture_snippet(_first(markup, "p")) == '<p style="color: red">x</p>'

    long_markup = f"<pre>{'a' * 1000}</pre>"
    assert len(capture_snippet(_first(long_markup, "pre"))) == 500


def test_void_elements_do_not_swallow_siblings():
    markup = '<form><input name="q"><button>Go</button></form>'
    assert compute_selector(_first(markup, "button")) == "form > button"
    assert capture_snippet(_first(markup, "input")) == '<input name="q">'


def test_elements_remember_their_start_line():
    markup = "<ul>\n  <li>a</li>\n  <li\n    class=\"x\">b</li>\n</ul>"
    assert [li.line for li in parse_document(markup).find_all("li")] == [2, 3]


def test_describe_element_at_line():
    markup = "<main>\n  <p>one</p>\n  <p class=\"lead\">two</p>\n</main>"

    assert describe_element_at(markup, "P", 3) == (
        "main > p.lead:nth-of-type(2)",
        '<p class="lead">two</p>',
    )
    assert describe_element_at(markup, "p", 1) is None


def _script_constant(script, name):
    return re.search(rf"var {name} = (.+);", script).group(1)


def test_constants_match_the_preview_script():
    script = resources.files("synapse_backend").joinpath("static/inspector.js").read_text(encoding="utf-8")

    assert int(_script_constant(script, "MAX_DEPTH")) == dom_selector.MAX_SELECTOR_DEPTH
    assert int(_script_constant(script, "MAX_CLASSES")) == dom_selector.MAX_CLASSES
    assert int(_script_constant(script, "MAX_SNIPPET_LENGTH")) == dom_selector.MAX_SNIPPET_LENGTH
    assert set(re.findall(r"'([^']+)'", _script_constant(script, "INSPECTOR_CLASSES"))) == dom_selector.INSPECTOR_CLASSES
