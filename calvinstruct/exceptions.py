class CalvinException(Exception):
    '''Base class to extend in order to throw exception in calvinstruct.

    It takes an argument that represents the chain of the layer that
    caused the exception: each chunk the exception passes through appends
    the name of the failing field, so the chain reads innermost first.
    '''

    def __init__(self, chain=None, msg=None):
        self.chain = chain if chain is not None else []
        self.msg = msg
        super().__init__(msg)

    @property
    def path(self):
        return '.'.join(self.chain[::-1])

    def __str__(self):
        msg = self.msg or self.__class__.__name__
        return f'{msg} (at {self.path})' if self.chain else msg


class UnpackException(CalvinException):
    pass


class TruncatedStream(UnpackException):
    '''Fewer bytes available than a field declares.'''
    pass


class MagicException(CalvinException):
    pass


class BadMagic(MagicException):
    pass


class UnsupportedVersion(CalvinException):
    pass


class UnknownMimeType(CalvinException):
    pass


class UnrecoverableException(CalvinException):
    '''This is useful when is not possible to let an unknown value
    slip through the parsing.'''
    pass


class LimitExceeded(UnrecoverableException):
    pass
