class OpenBetaError(Exception):
    pass


class IngestionError(OpenBetaError):
    pass


class ParsingError(OpenBetaError):
    pass


class ValidationError(OpenBetaError):
    pass
