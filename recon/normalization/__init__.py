from recon.normalization.normalizer import TextNormalizer

__all__ = ["TextNormalizer"]
