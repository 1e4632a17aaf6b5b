"""
Inspection domain exceptions
"""


class InspectionException(Exception):
    """Base inspection exception"""
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ReportLoadError(InspectionException):
    """A stored report could not be read"""
    pass


class ReportSaveError(InspectionException):
    """A report could not be persisted (retryable)"""
    pass


class ReportExportError(InspectionException):
    """PDF rendering failed (retryable)"""
    pass


class ReportNotFinalizedError(InspectionException):
    """Export requested for a report that was never finalized"""
    pass


class FormSessionNotFoundError(InspectionException):
    """Unknown form session id"""
    pass


class FormSaveInProgressError(InspectionException):
    """Edit attempted while the form is being saved"""
    pass
