from marketdesk.fallback.chain import ChainResult, FallbackChain
from marketdesk.fallback.synthesizer import FallbackSynthesizer, load_reference_prices

__all__ = ["ChainResult", "FallbackChain", "FallbackSynthesizer", "load_reference_prices"]
