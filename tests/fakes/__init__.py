from tests.fakes.builders import make_enhanced
from tests.fakes.fake_gateway import FakeGateway, pipeline_responder
from tests.fakes.fake_openai import FakeOpenAIClient, completion

__all__ = ["FakeGateway", "pipeline_responder", "FakeOpenAIClient", "completion", "make_enhanced"]
