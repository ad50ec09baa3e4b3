import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    # Where the CLI looks for templates when no directory is given
    TEMPLATES_DIR = os.getenv('ENVELOPE_TEMPLATES_DIR', 'templates')
    TEMPLATE_EXTENSIONS = ('yml', 'yaml')

    # Logging
    LOG_LEVEL = os.getenv('ENVELOPE_TEMPLATES_LOG_LEVEL', 'INFO').upper()

    # PDF overlay rendering
    PDF_FONT = os.getenv('ENVELOPE_TEMPLATES_PDF_FONT', 'Helvetica')
