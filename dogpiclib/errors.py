READ_ERROR_MESSAGE = "Could not read the file 😒."
WRITE_ERROR_MESSAGE = "Could not write to file 😒."


class PipelineError(Exception):
    """Base class for every failure the dog-pic pipeline can raise."""


class ReadError(PipelineError):
    def __init__(self, message: str = READ_ERROR_MESSAGE) -> None:
        super().__init__(message)


class WriteError(PipelineError):
    def __init__(self, message: str = WRITE_ERROR_MESSAGE) -> None:
        super().__init__(message)


class FetchError(PipelineError):
    pass
