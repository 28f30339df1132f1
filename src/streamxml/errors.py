class XmlWriterError(Exception):
    pass


class EmptyStackError(XmlWriterError, IndexError):
    pass


class SinkWriteError(XmlWriterError, OSError):
    pass


class WriterDetachedError(XmlWriterError):
    pass


class InvalidSinkError(XmlWriterError, TypeError):
    pass


class UnencodableTextError(XmlWriterError, ValueError):
    pass
