from recon.extraction.extractor import ItemExtractor, index_by_serial
from recon.extraction.models import ExtractedLineItem

__all__ = ["ExtractedLineItem", "ItemExtractor", "index_by_serial"]
