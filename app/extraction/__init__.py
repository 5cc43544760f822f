from app.extraction.aggregator import ResultAggregator
from app.extraction.extractor import PageExtractor
from app.extraction.factory import ExtractionClientFactory, build_aggregator
from app.extraction.models import AggregatedDocument, ErrorCause, PageExtraction
from app.extraction.parser import parse_structured_response

__all__ = [
    "AggregatedDocument",
    "ErrorCause",
    "ExtractionClientFactory",
    "PageExtraction",
    "PageExtractor",
    "ResultAggregator",
    "build_aggregator",
    "parse_structured_response",
]
