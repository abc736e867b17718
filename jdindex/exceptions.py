class JDError(Exception):
    def __init__(self, message):
        self.message = message
        super().__init__(message)


class OutOfRangeError(JDError):
    def __init__(self, message="JD number is out of range."):
        super().__init__(message)


class MissingFieldError(JDError):
    pass


class MismatchError(JDError):
    pass


class RangeShapeError(JDError):
    pass


class GrammarError(JDError):
    pass


class DuplicateError(JDError):
    def __init__(self, message="Element already exists."):
        super().__init__(message)


class NotFoundError(JDError):
    pass


class ParseError(JDError):
    def __init__(self, text, message="Could not parse JD number."):
        self.text = text
        super().__init__(message)


class IndexFileError(JDError):
    def __init__(self, path, message):
        self.path = path
        super().__init__(message)
