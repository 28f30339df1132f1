import io
import pytest
from pydantic import ValidationError

from streamxml.escape import escape_attr, escape_text
from streamxml.models.namespace import NamespaceDecl
from streamxml.models.options import WriterOptions
from streamxml.writer import XmlWriter


def test_escape_text():
    assert escape_text("a < b & c") == "a &lt; b &amp; c"
    assert escape_text("&amp;") == "&amp;amp;"
    assert escape_text("\"it's\"") == "\"it's\""


def test_escape_attr():
    assert escape_attr('"v"') == "&quot;v&quot;"
    assert escape_attr("<a href='x'>") == "&lt;a href='x'&gt;"
    assert escape_attr("") == ""


def test_options_defaults():
    o = WriterOptions()
    assert (o.pretty, o.indent, o.namespace, o.encoding) == (False, 2, None, "utf-8")


@pytest.mark.parametrize("kwargs", [
    {"indent": -1},
    {"encoding": "no-such-codec"},
    {"namespace": ""},
])
def test_options_validation(kwargs):
    with pytest.raises(ValidationError):
        WriterOptions(**kwargs)


def test_writer_overrides_win_over_options():
    opts = WriterOptions(pretty=True, indent=8, namespace="x")
    xml = XmlWriter(io.BytesIO(), opts, indent=1, namespace=None)
    assert xml.pretty is True
    assert xml.indent == 1
    assert xml.namespace is None


def test_writer_rejects_bad_override():
    with pytest.raises(ValidationError):
        XmlWriter(io.BytesIO(), indent=-3)


def test_namespace_decl_attr_name():
    assert NamespaceDecl(uri="u").attr_name == "xmlns"
    assert NamespaceDecl(prefix="p", uri="u").attr_name == "xmlns:p"
    assert NamespaceDecl.coerce(("p", "u")) == NamespaceDecl(prefix="p", uri="u")
