"""Errors raised while parsing, checking and generating"""


class WrapError(Exception):
    """Base class for all wrapgen failures"""


class ParseFailed(WrapError):
    """The grammar could not consume the whole interface file"""

    def __init__(self, offset: int, excerpt: str = "", reason: str = ""):
        self.offset = offset
        self.excerpt = excerpt
        self.reason = reason
        message = f"parsing stopped at offset {offset}"
        if reason:
            message += f": {reason}"
        if excerpt:
            message += f"\n{excerpt}"
        super().__init__(message)


class DependencyMissing(WrapError):
    """A member refers to a type that is neither built in nor declared"""

    def __init__(self, type_name: str, member_name: str):
        self.type_name = type_name
        self.member_name = member_name
        super().__init__(f"Missing dependency {type_name} in {member_name}")


class CantOpenFile(WrapError):
    """An output file could not be created or written"""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"Can't open file {self.path}")
