"""Mock provider package: deterministic canned replies for tests."""

from .client import Generation, GenerationRecorder, MockProvider, MockReply, MockTransport

__all__ = ["MockProvider", "MockReply", "MockTransport", "GenerationRecorder", "Generation"]
