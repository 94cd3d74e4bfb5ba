"""Core functionality for deploy-sentry"""

from .file_source import FileSource, GlobFileSource, compile_pattern
from .revision_tagger import RevisionTagger, head_footer_snippet, revision_meta_tag

__all__ = [
    "FileSource",
    "GlobFileSource",
    "compile_pattern",
    "RevisionTagger",
    "head_footer_snippet",
    "revision_meta_tag",
]
