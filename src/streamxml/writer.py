from __future__ import annotations
import codecs
import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Mapping, Optional, Tuple, Union

from .errors import EmptyStackError, SinkWriteError, UnencodableTextError, WriterDetachedError
from .escape import escape_attr, escape_text
from .models.namespace import NamespaceDecl
from .models.options import WriterOptions
from .sink import Sink, check_sink, flush_sink

logger = logging.getLogger(__name__)

NsItem = Union[NamespaceDecl, Tuple[Optional[str], str]]


class XmlWriter:
    """
    Streaming XML writer. Every call goes straight to the sink; the only state
    kept is the stack of open elements and whether the last start tag still
    lacks its closing '>' (attributes may be appended while it does).

    Misuse such as attr() outside a start tag, '--' in comments or ']]>' in
    CDATA is not checked and yields malformed XML. end_elem() on an empty
    stack raises EmptyStackError.
    """
    __slots__ = ("_sink", "_stack", "_opened", "_encoder", "pretty", "indent", "namespace", "encoding")

    def __init__(self, sink: Sink, options: WriterOptions | None = None, **overrides):
        base = options.model_dump() if options is not None else {}
        opts = WriterOptions.model_validate({**base, **overrides})
        self._sink: Sink | None = check_sink(sink)
        self._stack: list[tuple[str, str | None]] = []   # (name, ns prefix at open time)
        self._opened = False
        self.pretty = opts.pretty
        self.indent = opts.indent
        self.namespace = opts.namespace
        self.encoding = opts.encoding
        # one encoder per document: BOM-carrying codecs (utf-16, utf-8-sig) emit it once
        self._encoder = codecs.getincrementalencoder(self.encoding)()
        logger.debug("XmlWriter created over %s (pretty=%s)", type(sink).__name__, self.pretty)

    def __repr__(self) -> str:
        return f"XmlWriter(stack={[n for n, _ in self._stack]!r}, opened={self._opened})"

    @property
    def depth(self) -> int: return len(self._stack)
    @property
    def pending(self) -> bool: return self._opened

    # ---- raw output ----

    def write(self, raw: str | bytes) -> None:
        """
        Raw write, no escaping, no state change. Use at own risk.
        Characters the encoding cannot represent raise UnencodableTextError.
        """
        self._emit(raw)

    def _emit(self, raw: str | bytes, *, charrefs: bool = False) -> None:
        if self._sink is None:
            raise WriterDetachedError("writer was detached by into_inner()")
        data = self._encode(raw, charrefs) if isinstance(raw, str) else bytes(raw)
        self._send(data)

    def _encode(self, s: str, charrefs: bool) -> bytes:
        # escaped content may fall back to &#NNN;, markup may not
        self._encoder.errors = "xmlcharrefreplace" if charrefs else "strict"
        try:
            return self._encoder.encode(s)
        except UnicodeEncodeError as e:
            raise UnencodableTextError(
                f"{e.object[e.start:e.end]!r} cannot be encoded as {self.encoding}"
            ) from e

    def _send(self, data: bytes) -> None:
        while data:
            try:
                n = self._sink.write(data)
            except (OSError, ValueError) as e:
                logger.warning("sink write failed after %d open element(s): %s", len(self._stack), e)
                raise SinkWriteError(f"sink write failed: {e}") from e
            # None: sink reports nothing, assume it took everything (plain write-only sinks)
            if n is None:
                return
            if n == 0:
                raise SinkWriteError(f"sink accepted 0 of {len(data)} byte(s)")
            data = data[n:]

    def _close_pending(self) -> None:
        if self._opened:
            self._opened = False
            self.write(">")

    def _indent(self) -> None:
        if self.pretty and self._stack:
            self.write("\n" + " " * (self.indent * len(self._stack)))

    @staticmethod
    def _qname(name: str, ns: str | None) -> str:
        return f"{ns}:{name}" if ns else name

    # ---- document level ----

    def declaration(self, encoding: str | None = None) -> None:
        """Write the <?xml ...?> declaration. Never emitted automatically."""
        self.write(f'<?xml version="1.0" encoding="{encoding or self.encoding}" ?>\n')

    # ---- elements ----

    def begin_elem(self, name: str) -> None:
        self._close_pending()
        self._indent()
        ns = self.namespace
        self._stack.append((name, ns))
        self._opened = True
        self.write("<" + self._qname(name, ns))

    def end_elem(self) -> None:
        """Close the innermost element; an element with no body collapses to <name/>."""
        if not self._stack:
            raise EmptyStackError("end_elem() called with no open element")
        name, ns = self._stack.pop()
        if self._opened:
            self._opened = False
            self.write("/>")
        else:
            self.write(f"</{self._qname(name, ns)}>")

    def empty_elem(self, name: str) -> None:
        self._close_pending()
        self._indent()
        self.write(f"<{self._qname(name, self.namespace)}/>")

    def elem_text(self, name: str, content: str) -> None:
        """<name>content</name> in one call; content is escaped, the stack is untouched."""
        self._close_pending()
        self._indent()
        q = self._qname(name, self.namespace)
        self.write(f"<{q}>")
        self._emit(escape_text(content), charrefs=True)
        self.write(f"</{q}>")

    @contextmanager
    def element(self, name: str, attrs: Mapping[str, object] | None = None) -> Iterator["XmlWriter"]:
        """begin_elem + escaped attrs; the element is closed on exit, even if the body raises."""
        self.begin_elem(name)
        for k, v in (attrs or {}).items():
            self.attr_esc(k, str(v))
        try:
            yield self
        finally:
            self.end_elem()

    # ---- attributes (only valid while a start tag is pending) ----

    def attr(self, name: str, value: str) -> None:
        """Unescaped attribute; value must not contain '"', '<' or '&'. See attr_esc."""
        self.write(f' {name}="{value}"')

    def attr_esc(self, name: str, value: str) -> None:
        self.write(f' {name}="')
        self._emit(escape_attr(value), charrefs=True)
        self.write('"')

    def ns_decl(self, decls: Iterable[NsItem]) -> None:
        """Write xmlns / xmlns:prefix declarations into the pending start tag."""
        for item in decls:
            d = NamespaceDecl.coerce(item)
            self.attr_esc(d.attr_name, d.uri)

    # ---- content ----

    def text(self, content: str) -> None:
        self._close_pending()
        self._emit(escape_text(content), charrefs=True)

    def comment(self, content: str) -> None:
        self._close_pending()
        self._indent()
        self.write(f"<!--{content}-->")

    def cdata(self, content: str) -> None:
        self._close_pending()
        self.write(f"<![CDATA[{content}]]>")

    # ---- lifecycle ----

    def close(self) -> None:
        """Close every open element, innermost first."""
        n = len(self._stack)
        while self._stack:
            self.end_elem()
        if n:
            logger.debug("closed %d open element(s)", n)

    def flush(self) -> None:
        if self._sink is None:
            raise WriterDetachedError("writer was detached by into_inner()")
        try:
            flush_sink(self._sink)
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"sink flush failed: {e}") from e

    def into_inner(self) -> Sink:
        """
        Hand the sink back to the caller and detach it from the writer.
        Does not close or flush; call close()/flush() first for a complete document.
        """
        if self._sink is None:
            raise WriterDetachedError("writer was already detached")
        sink, self._sink = self._sink, None
        if self._stack:
            logger.debug("detached with %d element(s) still open", len(self._stack))
        return sink
