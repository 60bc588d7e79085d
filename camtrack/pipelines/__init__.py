from .framing_pipeline import FramingPipeline, FramingResult

__all__ = ['FramingPipeline', 'FramingResult']
