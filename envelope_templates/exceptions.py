"""
Envelope Template Exceptions

Custom exceptions for template loading and PDF rendering errors.
"""


class TemplateError(Exception):
    """Base exception for all envelope template errors."""
    pass


class ConfigurationError(TemplateError):
    """
    Raised when a template source cannot be loaded.

    This includes a missing template file, YAML syntax errors and
    schema validation failures (e.g., a document without a path).
    """
    def __init__(self, message: str, template_path: str = None):
        self.template_path = template_path
        super().__init__(message)


class PdfRenderError(TemplateError):
    """
    Raised when burning field values into a PDF fails.

    Wraps the underlying pypdf/reportlab error with context.
    """
    def __init__(self, message: str, document_path: str = None):
        self.document_path = document_path
        super().__init__(message)
