"""
Domain exceptions
"""


class CmsError(Exception):
    """Base class for errors raised by the CMS services"""


class TranslationUnavailable(CmsError):
    """The translation service could not produce a translation"""


class BackfillSchemaError(CmsError):
    """A backfill target table or column is missing or cannot be altered"""


class BackfillConfigError(CmsError):
    """Backfill targets are misconfigured or unknown"""


class ThemeConfigError(CmsError):
    """Theme configuration could not be read or written"""


class BackfillWriteError(CmsError):
    """Saving one translated row failed; the row is left unchanged"""
