"""Resolution and reconstruction pipeline stages."""

from .discovery import AnnotationDiscoverer, Discovery
from .emitter import DeclarationEmitter
from .extractor import DefaultExtractor
from .reconstructor import ExpressionReconstructor
from .resolver import MemberResolver

__all__ = [
    "AnnotationDiscoverer",
    "DeclarationEmitter",
    "DefaultExtractor",
    "Discovery",
    "ExpressionReconstructor",
    "MemberResolver",
]
